"""Concrete ULID service implementation."""

from __future__ import annotations

from packages.ulid_core.config import UlidCoreSettings
from packages.ulid_core.ids import Ulid, UlidGenerator, codec
from packages.ulid_core.logging import (
    configure_public_api_otel,
    get_logger,
    public_api_instrumented,
)
from packages.ulid_core.service import SERVICE_COMPONENT_ID, UlidService

_LOGGER = get_logger(__name__)


class DefaultUlidService(UlidService):
    """ULID service backed by one caller-owned ``UlidGenerator``."""

    def __init__(self, *, generator: UlidGenerator | None = None) -> None:
        self._generator = generator or UlidGenerator()

    @classmethod
    def from_settings(cls, *, settings: UlidCoreSettings) -> DefaultUlidService:
        """Build the service and apply the configured OTel names."""
        configure_public_api_otel(settings.observability.public_api.otel)
        return cls(
            generator=UlidGenerator(
                clock_regression=settings.generator.clock_regression,
            )
        )

    @property
    def generator(self) -> UlidGenerator:
        return self._generator

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("seed_time",),
    )
    def generate(self, seed_time: int | None = None) -> str:
        return self._generator.generate(seed_time)

    @public_api_instrumented(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def is_valid(self, text: object) -> bool:
        return codec.validate(text)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("text",),
    )
    def decode_time(self, text: str) -> int:
        return codec.decode_time(text)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("text",),
    )
    def decode(self, text: str) -> Ulid:
        return Ulid.parse(text)
