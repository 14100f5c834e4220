"""ByteRange location and parsing in signed PDFs."""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

from ...constants import BYTERANGE_MARKERS
from ...errors import ParseError

_logger = logging.getLogger(__name__)

# Four whitespace-separated unsigned integers inside the ByteRange array
_BYTERANGE_NUMBERS = re.compile(rb"(\d+)\s+(\d+)\s+(\d+)\s+(\d+)")


class ByteRange(NamedTuple):
    """The two signed spans of a PDF: ``[start1, start1+length1)`` and
    ``[start2, start2+length2)``.  The CMS hex sits between them."""

    start1: int
    length1: int
    start2: int
    length2: int

    @property
    def end(self) -> int:
        """Offset one past the last signed byte."""
        return self.start2 + self.length2


def find_byterange_marker(pdf_bytes: bytes) -> int:
    """Return the offset of the last ``/ByteRange`` marker.

    The compact form ``/ByteRange[`` is preferred; the spaced form is only
    searched when the compact one is absent.  Earlier markers may belong to
    unsigned placeholders, so the most recently written one is used.

    Raises:
        ParseError: If no marker is present.
    """
    for marker in BYTERANGE_MARKERS:
        pos = pdf_bytes.rfind(marker)
        if pos != -1:
            return pos
    raise ParseError("Failed to locate ByteRange.")


def get_byte_range(pdf_bytes: bytes) -> ByteRange:
    """
    Parse the last ByteRange array of a signed PDF.

    Args:
        pdf_bytes: Complete PDF file bytes.

    Returns:
        ByteRange with the four integers in document order.

    Raises:
        ParseError: If the marker is missing, unterminated, or does not hold
            four unsigned integers.
    """
    pos = find_byterange_marker(pdf_bytes)
    end = pdf_bytes.find(b"]", pos)
    if end == -1:
        raise ParseError("Failed to locate the end of ByteRange.")

    match = _BYTERANGE_NUMBERS.search(pdf_bytes, pos, end + 1)
    if match is None:
        raise ParseError(
            f"ByteRange is malformed: {pdf_bytes[pos : end + 1].decode('latin-1')!r}"
        )

    byte_range = ByteRange(*(int(group) for group in match.groups()))
    _logger.debug("ByteRange at offset %d: %s", pos, list(byte_range))
    return byte_range
