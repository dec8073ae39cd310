import logging
import plistlib
from typing import Any

from itl.domain.ports import PlistDecoder

logger = logging.getLogger(__name__)


class PlistlibDecoder(PlistDecoder):
    """Property-list decoder adapter backed by the standard ``plistlib`` module.

    Accepts both the XML and the binary plist formats; the format is detected
    from the document header.
    """

    def __init__(self, fmt=None):
        """Initialize the decoder.

        Args:
            fmt: ``plistlib.FMT_XML`` or ``plistlib.FMT_BINARY`` to force a
                format, or None to autodetect.
        """
        self._fmt = fmt

    def decode(self, data: bytes) -> Any:
        """Decode plist bytes into plain containers.

        Raises whatever ``plistlib`` raises on malformed input
        (``plistlib.InvalidFileException``, ``xml.parsers.expat.ExpatError``,
        ``ValueError`` ...).
        """
        logger.debug(f"Decoding {len(data)} bytes of plist data (format={self._fmt or 'auto'})")
        return plistlib.loads(data, fmt=self._fmt)
