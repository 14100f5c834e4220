"""pdfverify error types."""

from __future__ import annotations

__all__ = [
    "ByteRangeVerificationError",
    "CertificateChainError",
    "InputTypeError",
    "ParseError",
    "UnsupportedSubfilterError",
    "VerifyPDFError",
    "VerifySignatureError",
]


class VerifyPDFError(Exception):
    """Base error for PDF signature verification.

    Every subclass carries a short ``kind`` tag so that a negative
    verification result can be classified without isinstance chains.
    """

    kind = "generic"


class InputTypeError(VerifyPDFError):
    """Input is not a bytes-like PDF buffer."""

    kind = "input"


class ParseError(VerifyPDFError):
    """ByteRange, SubFilter, digest algorithm, or CMS envelope is malformed."""

    kind = "parse"


class UnsupportedSubfilterError(VerifyPDFError):
    """SubFilter names a signature type other than a detached CMS signature."""

    kind = "unsupported_subfilter"


class ByteRangeVerificationError(VerifyPDFError):
    """Signed ByteRange does not reach the end of the document."""

    kind = "byte_range"


class VerifySignatureError(VerifyPDFError):
    """Signed attributes do not verify against the signer's public key."""

    kind = "verify_signature"


class CertificateChainError(VerifyPDFError):
    """Embedded certificates cannot be ordered into a single chain."""

    kind = "chain"
