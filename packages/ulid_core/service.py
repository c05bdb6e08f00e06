"""Authoritative in-process Python API for ULID generation and decoding."""

from __future__ import annotations

from abc import ABC, abstractmethod

from packages.ulid_core.config import UlidCoreSettings
from packages.ulid_core.ids import Ulid

SERVICE_COMPONENT_ID = "service_ulid"


class UlidService(ABC):
    """Public API for generating, validating, and decoding ULIDs."""

    @abstractmethod
    def generate(self, seed_time: int | None = None) -> str:
        """Return a new 26-char ULID, stamped with ``seed_time`` when given."""

    @abstractmethod
    def is_valid(self, text: object) -> bool:
        """Return whether ``text`` is a syntactically valid ULID string."""

    @abstractmethod
    def decode_time(self, text: str) -> int:
        """Return the millisecond timestamp encoded in ``text``."""

    @abstractmethod
    def decode(self, text: str) -> Ulid:
        """Return both components encoded in ``text``."""


def build_ulid_service(*, settings: UlidCoreSettings) -> UlidService:
    """Build the default ULID service implementation from typed settings."""
    from packages.ulid_core.implementation import DefaultUlidService

    return DefaultUlidService.from_settings(settings=settings)
