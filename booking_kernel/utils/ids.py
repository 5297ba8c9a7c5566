"""
Time-ordered identifiers.

Ids are UUIDs with the version 7 layout: a 48-bit millisecond timestamp
followed by random bits.  Sorting ids lexically sorts them by creation time,
which keeps timeline and dispute listings stable without a separate sequence.

The timestamp comes from the caller (an injected ``Clock``), never from the
system clock, so ids minted in tests are reproducible in their ordering.
"""

import secrets
from datetime import datetime
from uuid import UUID


def new_ordered_id(at: datetime) -> UUID:
    """
    Mint a UUIDv7-layout id for the given instant.

    Args:
        at: Timezone-aware creation time.

    Returns:
        UUID whose leading 48 bits encode ``at`` in Unix milliseconds.
    """
    unix_ms = int(at.timestamp() * 1000) & ((1 << 48) - 1)
    rand_a = secrets.randbits(12)
    rand_b = secrets.randbits(62)
    value = (unix_ms << 80) | (0x7 << 76) | (rand_a << 64) | (0b10 << 62) | rand_b
    return UUID(int=value)


def new_display_id(prefix: str, at: datetime) -> str:
    """
    Human-facing reference such as ``BKG-0192F3A1C2D4-8E1B``.

    The middle segment is the creation timestamp in hex, so display ids
    sort in creation order as well.
    """
    oid = new_ordered_id(at)
    hex_id = oid.hex.upper()
    return f"{prefix}-{hex_id[:12]}-{hex_id[-4:]}"
