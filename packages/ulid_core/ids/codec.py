"""Crockford Base32 codec for canonical ULID text.

The canonical text form is 26 symbols: 10 for the big-endian 48-bit timestamp
(zero-padded to 50 bits) followed by 16 for the big-endian 80-bit randomness.
Because symbols are emitted most-significant first over an alphabet in ASCII
order, plain string comparison orders ULIDs by timestamp, then randomness.
"""

from __future__ import annotations

from packages.ulid_core.errors import MalformedUlid
from packages.ulid_core.ids.constants import (
    DECODE_TABLE,
    ENCODING,
    RANDOM_LENGTH,
    RANDOM_MAX,
    TIME_LENGTH,
    TIME_MAX,
    ULID_LENGTH,
)


def encode(timestamp: int, randomness: int) -> str:
    """Encode a timestamp/randomness pair into a 26-char ULID string."""
    return encode_time(timestamp) + encode_random(randomness)


def encode_time(timestamp: int) -> str:
    """Encode a 48-bit millisecond timestamp into its 10-char prefix."""
    if timestamp < 0 or timestamp > TIME_MAX:
        raise ValueError("timestamp out of ULID 48-bit range")
    return _encode_symbols(timestamp, TIME_LENGTH)


def encode_random(randomness: int) -> str:
    """Encode 80-bit randomness into its 16-char suffix."""
    if randomness < 0 or randomness > RANDOM_MAX:
        raise ValueError("randomness out of ULID 80-bit range")
    return _encode_symbols(randomness, RANDOM_LENGTH)


def validate(text: object) -> bool:
    """Return whether ``text`` is 26 Crockford Base32 symbols.

    This is a syntactic predicate only; it never raises and does not check
    that the encoded timestamp is a plausible calendar time.
    """
    if not isinstance(text, str) or len(text) != ULID_LENGTH:
        return False
    return all(char in DECODE_TABLE for char in text)


def decode_time(text: str) -> int:
    """Decode the millisecond timestamp from a ULID string.

    Only the first 10 symbols are decoded; the randomness suffix is checked
    for alphabet membership but otherwise ignored.
    """
    symbols = _require_symbols(text)
    timestamp = _decode_symbols(symbols[:TIME_LENGTH])
    if timestamp > TIME_MAX:
        raise MalformedUlid(f"ULID timestamp exceeds 48-bit range: {text!r}")
    return timestamp


def decode_int(text: str) -> int:
    """Decode all 26 symbols into one integer.

    26 symbols carry 130 bits, so the result may exceed the 128-bit ULID range;
    callers that need a canonical value must range-check it.
    """
    return _decode_symbols(_require_symbols(text))


def normalize(text: str) -> str:
    """Return the canonical uppercase form of a valid ULID string."""
    return _require_symbols(text).upper()


def _require_symbols(text: object) -> str:
    """Return ``text`` unchanged when it is structurally valid, else raise."""
    if not isinstance(text, str):
        raise MalformedUlid(f"ULID must be a string, got {type(text).__name__}")
    if len(text) != ULID_LENGTH:
        raise MalformedUlid(
            f"ULID string must be exactly {ULID_LENGTH} characters, got {len(text)}"
        )
    for char in text:
        if char not in DECODE_TABLE:
            raise MalformedUlid(f"Invalid ULID character: {char!r}")
    return text


def _encode_symbols(number: int, length: int) -> str:
    chars: list[str] = []
    for _ in range(length):
        number, remainder = divmod(number, 32)
        chars.append(ENCODING[remainder])
    return "".join(reversed(chars))


def _decode_symbols(symbols: str) -> int:
    number = 0
    for char in symbols:
        number = (number << 5) | DECODE_TABLE[char]
    return number
