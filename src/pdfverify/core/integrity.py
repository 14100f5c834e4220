# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Signed-attribute verification and messageDigest integrity comparison."""

from __future__ import annotations

__all__ = [
    "IntegrityResult",
    "find_signer_certificate",
    "get_hash_algorithm",
    "get_message_digest",
    "resolve_hash_algo",
    "verify_integrity",
    "verify_signed_attributes",
]

import hashlib
import hmac
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.serialization import load_der_public_key

from ..constants import OID_MESSAGE_DIGEST
from ..errors import ParseError, VerifySignatureError

if TYPE_CHECKING:
    from asn1crypto import cms as asn1_cms
    from asn1crypto import x509 as asn1_x509

    from .pdf.envelope import DecodedSignatureMessage

_logger = logging.getLogger(__name__)

_HASH_NAMES = frozenset({"sha1", "sha224", "sha256", "sha384", "sha512"})

# Map CMS digest algorithm OIDs to hashlib names.  Some signers put
# the signature algorithm (e.g. sha1WithRSAEncryption) in the digestAlgorithm
# field instead of the bare digest.
_DIGEST_ALGO_MAP: dict[str, str] = {
    "1.3.14.3.2.26": "sha1",
    "2.16.840.1.101.3.4.2.4": "sha224",
    "2.16.840.1.101.3.4.2.1": "sha256",
    "2.16.840.1.101.3.4.2.2": "sha384",
    "2.16.840.1.101.3.4.2.3": "sha512",
    "1.2.840.113549.1.1.5": "sha1",  # sha1WithRSAEncryption
    "1.2.840.113549.1.1.14": "sha224",  # sha224WithRSAEncryption
    "1.2.840.113549.1.1.11": "sha256",  # sha256WithRSAEncryption
    "1.2.840.113549.1.1.12": "sha384",  # sha384WithRSAEncryption
    "1.2.840.113549.1.1.13": "sha512",  # sha512WithRSAEncryption
    "1.2.840.10045.4.1": "sha1",  # ecdsa-with-SHA1
    "1.2.840.10045.4.3.1": "sha224",  # ecdsa-with-SHA224
    "1.2.840.10045.4.3.2": "sha256",  # ecdsa-with-SHA256
    "1.2.840.10045.4.3.3": "sha384",  # ecdsa-with-SHA384
    "1.2.840.10045.4.3.4": "sha512",  # ecdsa-with-SHA512
}

_CRYPTO_HASHES: dict[str, type[hashes.HashAlgorithm]] = {
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


@dataclass(frozen=True, slots=True)
class IntegrityResult:
    """Outcome of comparing the document hash with the signed messageDigest."""

    integrity: bool
    hash_algorithm: str
    computed_digest: bytes
    attr_digest: bytes


def resolve_hash_algo(algo_raw: str) -> str | None:
    """Resolve a CMS digest algorithm identifier to a hashlib-compatible name.

    Args:
        algo_raw: Bare hash name or dotted OID.

    Returns:
        hashlib algorithm name, or None if unrecognized.
    """
    if algo_raw in _HASH_NAMES:
        return algo_raw
    return _DIGEST_ALGO_MAP.get(algo_raw)


def get_hash_algorithm(message: DecodedSignatureMessage) -> str:
    """Resolve the digest algorithm of a decoded message.

    Raises:
        ParseError: If the algorithm is not supported.
    """
    algo_name = resolve_hash_algo(message.digest_algorithm)
    if algo_name is None:
        raise ParseError(f"Unsupported digest algorithm: {message.digest_algorithm}")
    return algo_name


def find_signer_certificate(
    message: DecodedSignatureMessage,
    certs: Sequence[asn1_x509.Certificate],
) -> asn1_x509.Certificate | None:
    """Find the certificate named by the SignerInfo sid, if embedded."""
    sid = message.signer_id
    if sid.name == "issuer_and_serial_number":
        issuer = sid.chosen["issuer"]
        serial = sid.chosen["serial_number"].native
        for cert in certs:
            if cert.serial_number == serial and cert.issuer == issuer:
                return cert
    elif sid.name == "subject_key_identifier":
        key_id = sid.chosen.native
        for cert in certs:
            if cert.key_identifier == key_id:
                return cert
    _logger.debug("SignerInfo sid (%s) matches no embedded certificate", sid.name)
    return None


def _pss_padding(signature_algorithm: asn1_cms.SignedDigestAlgorithm) -> tuple[padding.PSS, str]:
    params = signature_algorithm["parameters"]
    hash_name = params["hash_algorithm"]["algorithm"].native
    mgf_hash_name = params["mask_gen_algorithm"]["parameters"]["algorithm"].native
    if hash_name not in _CRYPTO_HASHES or mgf_hash_name not in _CRYPTO_HASHES:
        raise ParseError(f"Unsupported RSA-PSS hash: {hash_name}/{mgf_hash_name}")
    pss = padding.PSS(
        mgf=padding.MGF1(_CRYPTO_HASHES[mgf_hash_name]()),
        salt_length=params["salt_length"].native,
    )
    return pss, hash_name


def verify_signed_attributes(
    message: DecodedSignatureMessage,
    cert: asn1_x509.Certificate,
    hash_name: str,
) -> bool:
    """
    Check that the authenticated attributes were signed by ``cert``.

    The attributes are re-encoded as a universal DER SET (they are stored
    with an implicit [0] tag) and verified against the raw signature.

    Args:
        message: Decoded CMS envelope.
        cert: Signer certificate.
        hash_name: hashlib name of the digest algorithm.

    Returns:
        True if the signature verifies.

    Raises:
        ParseError: If the signer key or signature scheme is unsupported.
    """
    signed_blob = message.signed_attrs.untag().dump()
    try:
        public_key = load_der_public_key(cert.public_key.dump())
    except (ValueError, UnsupportedAlgorithm) as e:
        raise ParseError(f"Unsupported signer public key: {e}") from e

    try:
        if isinstance(public_key, rsa.RSAPublicKey):
            if message.signature_algorithm.signature_algo == "rsassa_pss":
                pss, hash_name = _pss_padding(message.signature_algorithm)
                public_key.verify(message.signature, signed_blob, pss, _CRYPTO_HASHES[hash_name]())
            else:
                public_key.verify(
                    message.signature,
                    signed_blob,
                    padding.PKCS1v15(),
                    _CRYPTO_HASHES[hash_name](),
                )
        elif isinstance(public_key, ec.EllipticCurvePublicKey):
            public_key.verify(message.signature, signed_blob, ec.ECDSA(_CRYPTO_HASHES[hash_name]()))
        else:
            raise ParseError(f"Unsupported signer key type: {type(public_key).__name__}")
    except InvalidSignature:
        return False
    return True


def get_message_digest(signed_attrs: asn1_cms.CMSAttributes) -> bytes:
    """Return the messageDigest value of the authenticated attributes.

    Raises:
        ParseError: If the attribute is missing or empty.
    """
    for attr in signed_attrs:
        if attr["type"].dotted == OID_MESSAGE_DIGEST:
            values = attr["values"]
            if values:
                return values[0].native
    raise ParseError("messageDigest attribute not found in signature.")


def verify_integrity(
    message: DecodedSignatureMessage,
    signed_data: bytes,
    cert: asn1_x509.Certificate,
) -> IntegrityResult:
    """
    Verify the authenticated attributes, then compare digests.

    Args:
        message: Decoded CMS envelope.
        signed_data: Concatenated ByteRange spans.
        cert: Signer certificate.

    Returns:
        IntegrityResult; ``integrity`` is True when the hash of
        ``signed_data`` equals the signed messageDigest.

    Raises:
        VerifySignatureError: If the authenticated attributes do not verify.
        ParseError: If the digest algorithm, key type, or messageDigest
            attribute is unusable.
    """
    hash_name = get_hash_algorithm(message)

    if not verify_signed_attributes(message, cert, hash_name):
        raise VerifySignatureError("Wrong authenticated attributes")

    attr_digest = get_message_digest(message.signed_attrs)
    computed = hashlib.new(hash_name, signed_data).digest()
    integrity = hmac.compare_digest(computed, attr_digest)

    algo_upper = hash_name.upper()
    if integrity:
        _logger.debug("Hash OK -- %s matches messageDigest: %s", algo_upper, computed.hex())
    else:
        _logger.warning(
            "Hash MISMATCH -- ByteRange %s: %s, messageDigest: %s",
            algo_upper,
            computed.hex(),
            attr_digest.hex(),
        )

    return IntegrityResult(
        integrity=integrity,
        hash_algorithm=hash_name,
        computed_digest=computed,
        attr_digest=attr_digest,
    )
