"""Shared ULID layout constants.

This module centralizes bit widths, symbol counts, and the Crockford Base32
alphabet so encoders, decoders, and generators rely on one canonical source.
"""

ENCODING = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
# Lowercase symbols decode to the same values; nothing else is accepted.
DECODE_TABLE = {
    **{char: index for index, char in enumerate(ENCODING)},
    **{char.lower(): index for index, char in enumerate(ENCODING)},
}

TIME_BITS = 48
RANDOM_BITS = 80
ULID_BITS = TIME_BITS + RANDOM_BITS

TIME_MAX = (1 << TIME_BITS) - 1
RANDOM_MAX = (1 << RANDOM_BITS) - 1
ULID_MAX = (1 << ULID_BITS) - 1

TIME_LENGTH = 10
RANDOM_LENGTH = 16
ULID_LENGTH = TIME_LENGTH + RANDOM_LENGTH

RANDOM_BYTES_LENGTH = RANDOM_BITS // 8
ULID_BYTES_LENGTH = ULID_BITS // 8
