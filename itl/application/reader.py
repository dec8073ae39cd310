import re
from pathlib import Path
from typing import BinaryIO, Optional, Union

from itl.application.binding import bind
from itl.crosscutting.config import get_settings
from itl.crosscutting.logging import (
    CorrelationContext, get_logger, log_decode_complete, log_decode_start, log_error
)
from itl.domain.entities import Library
from itl.domain.errors import DecodeError, ReadError
from itl.domain.ports import PlistDecoder
from itl.infrastructure.plistlib_decoder import PlistlibDecoder


logger = get_logger(__name__)

# Encoding pseudo-attribute of a leading XML declaration.
_XML_DECL_ENCODING = re.compile(r"\A(\s*<\?xml\b[^>]*?)\s+encoding\s*=\s*([\"'])[^\"']*\2")


def _as_utf8_document(content: str) -> bytes:
    """Encode already-decoded text as UTF-8, dropping any declared encoding."""
    content = _XML_DECL_ENCODING.sub(r"\1", content.lstrip("\ufeff"), count=1)
    return content.encode("utf-8")


def _read_all(stream: BinaryIO) -> bytes:
    """Consume the whole stream into memory."""
    try:
        content = stream.read()
    except (OSError, ValueError) as e:
        raise ReadError(f"Failed to read library stream: {e}") from e

    if isinstance(content, str):
        return _as_utf8_document(content)
    if isinstance(content, (bytes, bytearray, memoryview)):
        return bytes(content)
    raise ReadError(f"Library stream returned {type(content).__name__}, expected bytes")


def _source_name(stream: BinaryIO) -> str:
    name = getattr(stream, 'name', None)
    return str(name) if isinstance(name, (str, Path)) else '<stream>'


def read_from_xml(stream: BinaryIO, decoder: Optional[PlistDecoder] = None) -> Library:
    """Read a library plist document from ``stream`` and return a ``Library``.

    The stream is read to the end before decoding starts. Both XML and binary
    property lists are accepted by the default decoder.

    Args:
        stream: Readable object positioned at the start of the document
        decoder: Generic plist decoder; defaults to ``PlistlibDecoder``

    Raises:
        ReadError: The stream could not be fully consumed
        DecodeError: The content is not a property list or does not match
            the library shape
    """
    decoder = decoder or PlistlibDecoder()
    source = _source_name(stream)

    with CorrelationContext(source=source, stage='read'):
        try:
            content = _read_all(stream)
        except ReadError as e:
            log_error(logger, "Library read failed", e)
            raise

    log_decode_start(logger, source, len(content))

    with CorrelationContext(source=source, stage='decode'):
        try:
            try:
                tree = decoder.decode(content)
            except Exception as e:
                raise DecodeError(f"invalid property list: {e}") from e
            library = bind(Library, tree)
        except DecodeError as e:
            log_error(logger, "Library decode failed", e)
            raise

    log_decode_complete(logger, source, len(library.tracks), len(library.playlists))
    return library


def read_library_file(path: Optional[Union[str, Path]] = None,
                      decoder: Optional[PlistDecoder] = None) -> Library:
    """Open and decode a library file.

    Args:
        path: Library file path; defaults to the configured ``ITL_LIBRARY_PATH``
        decoder: Generic plist decoder passed through to ``read_from_xml``
    """
    path = Path(path) if path is not None else get_settings().library_path
    try:
        stream = open(path, 'rb')
    except OSError as e:
        with CorrelationContext(source=str(path), stage='open'):
            log_error(logger, "Library file could not be opened", e)
        raise ReadError(f"Failed to open library file {path}: {e}") from e

    with stream:
        return read_from_xml(stream, decoder)
