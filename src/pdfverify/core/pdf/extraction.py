"""Signed data and CMS envelope extraction from signed PDFs."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TypedDict

from ...constants import SUPPORTED_SUBFILTERS
from ...errors import (
    ByteRangeVerificationError,
    InputTypeError,
    ParseError,
    UnsupportedSubfilterError,
)
from .byterange import ByteRange, get_byte_range

_logger = logging.getLogger(__name__)

_SUBFILTER_PATTERN = re.compile(rb"/SubFilter\s*/([\w.]*)")

# Signer-asserted strings in the signature dictionary, e.g. "/Reason (Approved)"
_META_KEYS = {"reason": b"Reason", "contact_info": b"ContactInfo", "location": b"Location"}


class SignatureMeta(TypedDict):
    """Signer-asserted signature dictionary entries (each optional)."""

    reason: str | None
    contact_info: str | None
    location: str | None


@dataclass(frozen=True, slots=True)
class ExtractedSignature:
    """Everything sliced out of the PDF for a single signature."""

    byte_range: ByteRange
    signed_data: bytes
    signature_meta: SignatureMeta
    signature_hex: str


def prepare_pdf(pdf: object) -> bytes:
    """Coerce a bytes-like object to ``bytes``.

    Raises:
        InputTypeError: If ``pdf`` is not bytes, bytearray, or memoryview.
    """
    if isinstance(pdf, bytes):
        return pdf
    if isinstance(pdf, (bytearray, memoryview)):
        return bytes(pdf)
    raise InputTypeError(f"PDF expected as bytes, got {type(pdf).__name__}.")


def check_subfilter(pdf_bytes: bytes) -> str:
    """Ensure the signature dictionary declares a supported detached SubFilter.

    Args:
        pdf_bytes: Complete PDF file bytes.

    Returns:
        The normalized (lowercase, trimmed) SubFilter value.

    Raises:
        ParseError: If no SubFilter is declared.
        UnsupportedSubfilterError: If the SubFilter is not a detached CMS type.
    """
    matches = _SUBFILTER_PATTERN.findall(pdf_bytes)
    raw = matches[-1].decode("latin-1") if matches else ""
    if not raw:
        raise ParseError("cannot find subfilter")

    subfilter = raw.strip().lower()
    if subfilter not in SUPPORTED_SUBFILTERS:
        raise UnsupportedSubfilterError(f"subFilter {raw} not supported")
    return subfilter


def _probe_meta(text: bytes, key: bytes) -> str | None:
    match = re.search(rb"/" + key + rb"\s*\(([\w.\s@,]*)", text)
    if match is None or not match.group(1):
        return None
    return match.group(1).decode("latin-1")


def get_signature_meta(signed_data: bytes) -> SignatureMeta:
    """Probe the signed data for Reason, ContactInfo and Location strings.

    Each probe is independent; a missing entry is ``None``, never an error.
    """
    return {
        "reason": _probe_meta(signed_data, _META_KEYS["reason"]),
        "contact_info": _probe_meta(signed_data, _META_KEYS["contact_info"]),
        "location": _probe_meta(signed_data, _META_KEYS["location"]),
    }


def strip_hex_padding(hex_str: str) -> str:
    """Remove whitespace and trailing ``00`` byte pairs from envelope hex.

    Stripping works in whole bytes counted from the end, so a final
    byte such as ``a0`` keeps its low nibble.
    """
    compact = "".join(hex_str.split())
    stripped = compact.rstrip("0")
    if (len(compact) - len(stripped)) % 2:
        stripped += "0"
    return stripped


def extract_signature_from_byterange(pdf_bytes: bytes, byte_range: ByteRange) -> ExtractedSignature:
    """
    Slice signed data and CMS envelope hex out of a PDF.

    ByteRange structure: ``[s1 l1 s2 l2]``; the excluded span between
    ``s1+l1`` and ``s2`` is ``<hex...>``, delimiters included.

    Args:
        pdf_bytes: Complete PDF file bytes.
        byte_range: Parsed ByteRange of the signature.

    Returns:
        ExtractedSignature with signed data, signer meta and stripped hex.

    Raises:
        ByteRangeVerificationError: If bytes follow the signed region.
        ParseError: If the ByteRange overlaps itself or points past EOF.
    """
    start1, length1, start2, _ = byte_range
    end = byte_range.end
    total = len(pdf_bytes)

    if start1 + length1 > start2:
        raise ParseError(
            f"Invalid ByteRange: first span ends at {start1 + length1}, "
            f"after second span start {start2}"
        )
    if end > total:
        raise ParseError(f"ByteRange extends beyond EOF: {end} > {total}")
    if end < total:
        _logger.warning("%d byte(s) appended after signed region", total - end)
        raise ByteRangeVerificationError("Failed byte range verification.")

    signed_data = pdf_bytes[start1 : start1 + length1] + pdf_bytes[start2:end]
    raw_hex = pdf_bytes[start1 + length1 + 1 : start2 - 1].decode("latin-1")
    signature_hex = strip_hex_padding(raw_hex)
    _logger.debug(
        "Signed data: %d bytes, envelope hex: %d chars (%d before stripping)",
        len(signed_data),
        len(signature_hex),
        len(raw_hex),
    )

    return ExtractedSignature(
        byte_range=byte_range,
        signed_data=signed_data,
        signature_meta=get_signature_meta(signed_data),
        signature_hex=signature_hex,
    )


def extract_signature(pdf: object) -> ExtractedSignature:
    """
    Extract the last signature of a signed PDF.

    For multi-signature PDFs, returns the last (most recent) signature.

    Raises:
        VerifyPDFError: If the input is not bytes-like, the ByteRange cannot
            be parsed, or the signed region does not cover the document.
    """
    pdf_bytes = prepare_pdf(pdf)
    return extract_signature_from_byterange(pdf_bytes, get_byte_range(pdf_bytes))
