# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""CMS/PKCS#7 envelope decoding with zero-padding recovery."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from asn1crypto import cms as asn1_cms
from asn1crypto import core as asn1_core

from ...constants import DEFAULT_MAX_PADDING_RETRIES
from ...errors import ParseError

_logger = logging.getLogger(__name__)

_HEX_PATTERN = re.compile(r"[0-9a-fA-F]*")


@dataclass(frozen=True, slots=True)
class DecodedSignatureMessage:
    """The parts of a detached CMS SignedData needed for verification.

    Attributes:
        certificates: DER-encoded X.509 certificates as stored in the
            envelope (a DER SET OF, so sorted by encoding rather than in
            the order the signer added them).
        signature: Raw signature over the signed attributes.
        signed_attrs: Authenticated attributes of the first SignerInfo.
        digest_algorithm: Dotted OID of SignerInfo.digestAlgorithm.
        signature_algorithm: SignerInfo.signatureAlgorithm (kept whole for
            RSA-PSS parameters).
        signer_id: SignerInfo.sid (issuer+serial or subject key identifier).
    """

    certificates: tuple[bytes, ...]
    signature: bytes
    signed_attrs: asn1_cms.CMSAttributes
    digest_algorithm: str
    signature_algorithm: asn1_cms.SignedDigestAlgorithm
    signer_id: asn1_cms.SignerIdentifier


def _load_signed_data(der: bytes) -> tuple[asn1_cms.SignedData, asn1_cms.SignerInfo]:
    """Parse DER strictly and pull out SignedData and its first SignerInfo.

    Raises:
        ValueError: On any structural decoding problem.
    """
    content_info = asn1_cms.ContentInfo.load(der, strict=True)
    content_type = content_info["content_type"].native
    if content_type != "signed_data":
        raise ValueError(f"Expected signed_data content, got {content_type}")

    signed_data = content_info["content"]
    signer_infos = signed_data["signer_infos"]
    if not signer_infos:
        raise ValueError("SignedData has no SignerInfo")
    return signed_data, signer_infos[0]


def _build_message(
    signed_data: asn1_cms.SignedData, signer_info: asn1_cms.SignerInfo
) -> DecodedSignatureMessage:
    certificate_set = signed_data["certificates"]
    if isinstance(certificate_set, asn1_core.Void):
        raise ParseError("No certificates found in signature.")
    certificates = tuple(
        choice.chosen.dump()
        for choice in certificate_set
        if choice.name == "certificate"
    )
    if not certificates:
        raise ParseError("No certificates found in signature.")

    signed_attrs = signer_info["signed_attrs"]
    if isinstance(signed_attrs, asn1_core.Void):
        raise ParseError("Signature has no authenticated attributes.")

    return DecodedSignatureMessage(
        certificates=certificates,
        signature=signer_info["signature"].native,
        signed_attrs=signed_attrs,
        digest_algorithm=signer_info["digest_algorithm"]["algorithm"].dotted,
        signature_algorithm=signer_info["signature_algorithm"],
        signer_id=signer_info["sid"],
    )


def decode_signature_message(
    signature_hex: str,
    *,
    max_retries: int = DEFAULT_MAX_PADDING_RETRIES,
) -> DecodedSignatureMessage:
    """
    Decode a hex CMS envelope into a DecodedSignatureMessage.

    Trailing zero padding was stripped during extraction, which truncates
    envelopes whose DER really ends in ``00`` bytes.  When decoding fails,
    one zero byte is appended and decoding is retried, up to
    ``max_retries`` times.

    Args:
        signature_hex: Hex-encoded DER envelope, trailing padding stripped.
        max_retries: Maximum number of zero bytes to re-append.

    Returns:
        DecodedSignatureMessage for the first SignerInfo.

    Raises:
        ParseError: If the hex is invalid, decoding still fails after the
            retry budget, or required parts are missing.
    """
    if not signature_hex:
        raise ParseError("Signature envelope is empty.")
    if len(signature_hex) % 2 or not _HEX_PATTERN.fullmatch(signature_hex):
        raise ParseError("Signature envelope is not valid hex.")

    der = bytes.fromhex(signature_hex)
    retries = 0
    while True:
        try:
            signed_data, signer_info = _load_signed_data(der)
            break
        except (ValueError, TypeError, KeyError) as e:
            if retries >= max_retries:
                raise ParseError(
                    f"Failed to decode signature after {retries} padding retries: {e}"
                ) from e
            retries += 1
            der += b"\x00"

    if retries:
        _logger.debug("Envelope decoded after appending %d zero byte(s)", retries)

    try:
        return _build_message(signed_data, signer_info)
    except (ValueError, TypeError, KeyError) as e:
        raise ParseError(f"Malformed SignerInfo in signature: {e}") from e
