"""
Verification of the last embedded PDF signature.

Sequences extraction, envelope decoding, integrity and chain checks, and
folds every failure into a negative VerificationResult.  Nothing raised by
the lower layers escapes :func:`verify_pdf`.
"""

from __future__ import annotations

import logging
from typing import TypedDict

from ..config import VerifyOptions, get_verify_options
from ..errors import CertificateChainError, ParseError, VerifyPDFError
from .cert_info import CertificateDetails, extract_certificates_details, load_certificates
from .chain import authenticate_chain, is_chain_expired, sort_certificate_chain
from .integrity import find_signer_certificate, verify_integrity
from .pdf.byterange import get_byte_range
from .pdf.envelope import decode_signature_message
from .pdf.extraction import (
    SignatureMeta,
    check_subfilter,
    extract_signature_from_byterange,
    prepare_pdf,
)
from .pdf.structure import check_pdf_structure

_logger = logging.getLogger(__name__)


class VerificationMeta(TypedDict):
    """Diagnostic metadata gathered during verification."""

    certs: list[CertificateDetails]  # Chain, leaf first
    signature_meta: SignatureMeta | None  # Reason / contact / location
    structure: str | None  # pikepdf structure note (informational)


class VerificationResult(TypedDict):
    """Result of verifying one embedded signature."""

    verified: bool  # integrity and authenticity and not expired
    integrity: bool  # Document hash matches signed messageDigest
    authenticity: bool  # Every chain link verifies
    expired: bool  # Some certificate outside its validity window
    meta: VerificationMeta
    message: str | None  # Error message on failure
    error: VerifyPDFError | None  # Error on failure


def _failure(meta: VerificationMeta, error: VerifyPDFError) -> VerificationResult:
    _logger.warning("Signature verification failed (%s): %s", error.kind, error)
    return {
        "verified": False,
        "integrity": False,
        "authenticity": False,
        "expired": False,
        "meta": meta,
        "message": str(error),
        "error": error,
    }


def _verify(pdf: object, options: VerifyOptions, meta: VerificationMeta) -> VerificationResult:
    pdf_bytes = prepare_pdf(pdf)
    if options.structure_check:
        meta["structure"] = check_pdf_structure(pdf_bytes)

    subfilter = check_subfilter(pdf_bytes)
    _logger.debug("SubFilter: %s", subfilter)

    extracted = extract_signature_from_byterange(pdf_bytes, get_byte_range(pdf_bytes))
    meta["signature_meta"] = extracted.signature_meta

    message = decode_signature_message(
        extracted.signature_hex, max_retries=options.max_padding_retries
    )
    certs = load_certificates(message.certificates)
    signer = find_signer_certificate(message, certs)
    chain = None
    if signer is None:
        # No sid match: fall back to the chain leaf
        chain = sort_certificate_chain(certs)
        signer = chain[0]
    meta["certs"] = extract_certificates_details(certs, signer)

    integrity = verify_integrity(message, extracted.signed_data, signer).integrity

    if chain is None:
        chain = sort_certificate_chain(certs)
    meta["certs"] = extract_certificates_details(chain, signer)
    if chain[0].dump() != signer.dump():
        raise CertificateChainError(
            f"Signer {signer.subject.human_friendly!r} is not the leaf of the embedded chain"
        )

    authenticity = authenticate_chain(chain)
    expired = is_chain_expired(chain, options.now)

    verified = integrity and authenticity and not expired
    _logger.debug(
        "Verification done: verified=%s integrity=%s authenticity=%s expired=%s",
        verified,
        integrity,
        authenticity,
        expired,
    )
    return {
        "verified": verified,
        "integrity": integrity,
        "authenticity": authenticity,
        "expired": expired,
        "meta": meta,
        "message": None,
        "error": None,
    }


def verify_pdf(pdf: object, options: VerifyOptions | None = None) -> VerificationResult:
    """
    Verify the last embedded signature of a PDF.

    Checks:
    1. Integrity -- the ByteRange data hashes to the signed messageDigest,
       and the signed attributes verify against the signer's key
    2. Authenticity -- every certificate in the embedded chain is signed
       by its issuer
    3. Expiry -- every certificate is inside its validity window

    Args:
        pdf: The signed PDF as bytes, bytearray, or memoryview.
        options: Verification options. Resolved from the environment when
            omitted.

    Returns:
        VerificationResult with verified, integrity, authenticity, expired,
        meta, message and error.

    Never raises -- any failure returns verified=False with message and error.
    """
    if options is None:
        options = get_verify_options()
    meta: VerificationMeta = {"certs": [], "signature_meta": None, "structure": None}

    try:
        return _verify(pdf, options, meta)
    except VerifyPDFError as e:
        return _failure(meta, e)
    except (ValueError, TypeError, KeyError, AttributeError, IndexError, OverflowError) as e:
        _logger.debug("Unexpected decoding error", exc_info=True)
        error = ParseError(f"Malformed signature: {e}")
        error.__cause__ = e
        return _failure(meta, error)
