from __future__ import annotations

from typing import Any, Protocol


class PlistDecoder(Protocol):
    """Port for the generic property-list decoder.

    Implementations turn raw document bytes into plain Python containers
    (dict, list, str, int, float, bool, bytes, datetime) and know nothing of the
    library entities. Malformed input must raise an exception; the reader
    translates it into ``DecodeError``.
    """

    def decode(self, data: bytes) -> Any:
        """Decode a complete property-list document."""
