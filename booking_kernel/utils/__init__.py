"""Utility modules for the booking kernel."""

from booking_kernel.utils.hashing import (
    canonicalize_json,
    hash_payload,
)
from booking_kernel.utils.ids import (
    new_display_id,
    new_ordered_id,
)

__all__ = [
    "canonicalize_json",
    "hash_payload",
    "new_display_id",
    "new_ordered_id",
]
