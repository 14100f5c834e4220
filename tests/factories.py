"""Builders for real signed PDFs used across the test suite.

Keys and certificates come from ``cryptography``, the CMS SignedData from
``asn1crypto``, and the base document from ``pikepdf``.
"""

from __future__ import annotations

import datetime
import hashlib
import io
from dataclasses import dataclass
from typing import Any

from asn1crypto import algos as asn1_algos
from asn1crypto import cms as asn1_cms
from asn1crypto import x509 as asn1_x509
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.serialization import Encoding
from cryptography.x509.oid import NameOID

# Hex characters reserved for /Contents (8 KB of DER)
CMS_HEX_SIZE = 16384

_HASHES = {"sha1": hashes.SHA1, "sha256": hashes.SHA256, "sha512": hashes.SHA512}


@dataclass(frozen=True)
class Identity:
    """A key pair with its certificate."""

    key: Any
    cert: x509.Certificate

    @property
    def cert_der(self) -> bytes:
        return self.cert.public_bytes(Encoding.DER)


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def make_identity(
    common_name: str,
    *,
    issuer: Identity | None = None,
    key: Any = None,
    ca: bool = False,
    not_before: datetime.datetime | None = None,
    not_after: datetime.datetime | None = None,
    ec_key: bool = False,
) -> Identity:
    """Create a certificate, self-signed unless ``issuer`` is given."""
    if key is None:
        if ec_key:
            key = ec.generate_private_key(ec.SECP256R1())
        else:
            key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

    subject = x509.Name(
        [
            x509.NameAttribute(NameOID.COMMON_NAME, common_name),
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Test Org"),
        ]
    )
    issuer_name = issuer.cert.subject if issuer is not None else subject
    signing_key = issuer.key if issuer is not None else key

    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer_name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before or _now() - datetime.timedelta(days=1))
        .not_valid_after(not_after or _now() + datetime.timedelta(days=365))
        .add_extension(x509.BasicConstraints(ca=ca, path_length=None), critical=True)
    )
    cert = builder.sign(signing_key, hashes.SHA256())
    return Identity(key=key, cert=cert)


def build_signed_attrs(content: bytes, digest: str = "sha256") -> asn1_cms.CMSAttributes:
    return asn1_cms.CMSAttributes(
        [
            asn1_cms.CMSAttribute({"type": "content_type", "values": ["data"]}),
            asn1_cms.CMSAttribute(
                {"type": "message_digest", "values": [hashlib.new(digest, content).digest()]}
            ),
        ]
    )


def build_cms(
    content: bytes,
    signer: Identity,
    extra_certs: list[Identity] | tuple[Identity, ...] = (),
    *,
    digest: str = "sha256",
    signed_attrs: asn1_cms.CMSAttributes | None = None,
    signature: bytes | None = None,
) -> bytes:
    """Build a detached CMS SignedData over ``content``.

    ``signed_attrs`` and ``signature`` override the computed values.
    """
    if signed_attrs is None:
        signed_attrs = build_signed_attrs(content, digest)

    hash_algo = _HASHES[digest]()
    if isinstance(signer.key, ec.EllipticCurvePrivateKey):
        signature_algorithm = f"{digest}_ecdsa"
        if signature is None:
            signature = signer.key.sign(signed_attrs.dump(), ec.ECDSA(hash_algo))
    else:
        signature_algorithm = "rsassa_pkcs1v15"
        if signature is None:
            signature = signer.key.sign(signed_attrs.dump(), padding.PKCS1v15(), hash_algo)

    signer_cert = asn1_x509.Certificate.load(signer.cert_der)
    signer_info = asn1_cms.SignerInfo(
        {
            "version": "v1",
            "sid": asn1_cms.SignerIdentifier(
                {
                    "issuer_and_serial_number": asn1_cms.IssuerAndSerialNumber(
                        {
                            "issuer": signer_cert.issuer,
                            "serial_number": signer_cert.serial_number,
                        }
                    )
                }
            ),
            "digest_algorithm": asn1_algos.DigestAlgorithm({"algorithm": digest}),
            "signed_attrs": signed_attrs,
            "signature_algorithm": asn1_algos.SignedDigestAlgorithm(
                {"algorithm": signature_algorithm}
            ),
            "signature": signature,
        }
    )
    certificates = [signer_cert] + [
        asn1_x509.Certificate.load(ident.cert_der) for ident in extra_certs
    ]
    signed_data = asn1_cms.SignedData(
        {
            "version": "v1",
            "digest_algorithms": [asn1_algos.DigestAlgorithm({"algorithm": digest})],
            "encap_content_info": {"content_type": "data"},
            "certificates": certificates,
            "signer_infos": [signer_info],
        }
    )
    return asn1_cms.ContentInfo({"content_type": "signed_data", "content": signed_data}).dump()


def blank_pdf() -> bytes:
    """Create a minimal valid PDF using pikepdf."""
    import pikepdf

    pdf = pikepdf.Pdf.new()
    pdf.add_blank_page(page_size=(612, 792))
    buf = io.BytesIO()
    pdf.save(buf)
    return buf.getvalue()


def prepare_unsigned(
    base: bytes,
    *,
    subfilter: str = "adbe.pkcs7.detached",
    hex_size: int = CMS_HEX_SIZE,
) -> tuple[bytes, list[int]]:
    """Append a signature dictionary with a zero-filled /Contents.

    Returns:
        (pdf_bytes, byte_range) -- ByteRange already patched in.
    """
    br_placeholder = b"/ByteRange [0000000000 0000000000 0000000000 0000000000]"
    before = (
        base
        + b"\n9999 0 obj\n<< /Type /Sig /Filter /Adobe.PPKLite /SubFilter /"
        + subfilter.encode("ascii")
        + b" /Reason (Approved by QA) /ContactInfo (signer@example.com)"
        + b" /Location (Yerevan, AM) "
        + br_placeholder
        + b" /Contents <"
    )
    after = b">\n>>\nendobj\n%%EOF\n"

    len1 = len(before) - 1  # '<' is excluded
    start2 = len(before) + hex_size + 1  # just past '>'
    len2 = len(after) - 1
    byte_range = [0, len1, start2, len2]

    br = "/ByteRange [{:010d} {:010d} {:010d} {:010d}]".format(*byte_range).encode("ascii")
    pdf = before.replace(br_placeholder, br) + b"0" * hex_size + after
    return pdf, byte_range


def insert_signature(pdf: bytes, byte_range: list[int], cms_der: bytes) -> bytes:
    """Write CMS hex into the reserved /Contents, zero-padded."""
    hex_start = byte_range[1] + 1
    hex_size = byte_range[2] - 1 - hex_start
    cms_hex = cms_der.hex().encode("ascii")
    assert len(cms_hex) <= hex_size
    padded = cms_hex + b"0" * (hex_size - len(cms_hex))
    return pdf[:hex_start] + padded + pdf[hex_start + hex_size :]


def signed_content(pdf: bytes, byte_range: list[int]) -> bytes:
    s0, l0, s1, l1 = byte_range
    return pdf[s0 : s0 + l0] + pdf[s1 : s1 + l1]


def sign_pdf(
    signer: Identity,
    extra_certs: list[Identity] | tuple[Identity, ...] = (),
    *,
    base: bytes | None = None,
    digest: str = "sha256",
    subfilter: str = "adbe.pkcs7.detached",
) -> bytes:
    """Produce a signed PDF with a detached CMS signature."""
    pdf, byte_range = prepare_unsigned(base if base is not None else blank_pdf(), subfilter=subfilter)
    cms_der = build_cms(signed_content(pdf, byte_range), signer, extra_certs, digest=digest)
    return insert_signature(pdf, byte_range, cms_der)


