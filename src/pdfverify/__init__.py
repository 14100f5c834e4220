"""
pdfverify — verification of detached CMS/PKCS#7 signatures embedded in PDFs.

Checks document integrity, certificate chain authenticity, and certificate
expiry, and reports the outcome as a structured result.
"""

from __future__ import annotations

from .config import VerifyOptions, get_verify_options
from .constants import __version__
from .core.chain import ChainAnalysis, analyze_chain, sort_certificate_chain
from .core.pdf import (
    ByteRange,
    DecodedSignatureMessage,
    ExtractedSignature,
    check_subfilter,
    decode_signature_message,
    extract_signature,
    get_byte_range,
)
from .core.verify import VerificationResult, verify_pdf
from .errors import (
    ByteRangeVerificationError,
    CertificateChainError,
    InputTypeError,
    ParseError,
    UnsupportedSubfilterError,
    VerifyPDFError,
    VerifySignatureError,
)

__all__ = [
    "ByteRange",
    "ByteRangeVerificationError",
    "CertificateChainError",
    "ChainAnalysis",
    "DecodedSignatureMessage",
    "ExtractedSignature",
    "InputTypeError",
    "ParseError",
    "UnsupportedSubfilterError",
    "VerificationResult",
    "VerifyOptions",
    "VerifyPDFError",
    "VerifySignatureError",
    "__version__",
    "analyze_chain",
    "check_subfilter",
    "decode_signature_message",
    "extract_signature",
    "get_byte_range",
    "get_verify_options",
    "sort_certificate_chain",
    "verify_pdf",
]
