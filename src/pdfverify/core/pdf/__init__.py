"""PDF-level extraction: ByteRange, signed data, and CMS envelope decoding."""

from .byterange import ByteRange, find_byterange_marker, get_byte_range
from .envelope import DecodedSignatureMessage, decode_signature_message
from .extraction import (
    ExtractedSignature,
    SignatureMeta,
    check_subfilter,
    extract_signature,
    extract_signature_from_byterange,
    get_signature_meta,
    prepare_pdf,
    strip_hex_padding,
)
from .structure import check_pdf_structure

__all__ = [
    "ByteRange",
    "DecodedSignatureMessage",
    "ExtractedSignature",
    "SignatureMeta",
    "check_pdf_structure",
    "check_subfilter",
    "decode_signature_message",
    "extract_signature",
    "extract_signature_from_byterange",
    "find_byterange_marker",
    "get_byte_range",
    "get_signature_meta",
    "prepare_pdf",
    "strip_hex_padding",
]
