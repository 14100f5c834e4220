# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""
Certificate parsing and human-readable certificate details.

Pure data-parsing helpers shared by chain analysis and result reporting.
"""

from __future__ import annotations

__all__ = [
    "CertificateDetails",
    "NameInfo",
    "extract_certificates_details",
    "extract_name_info",
    "load_certificates",
]

import logging
from collections.abc import Iterable
from typing import TypedDict

from asn1crypto import pem as asn1_pem
from asn1crypto import x509 as asn1_x509

from ..errors import ParseError

_logger = logging.getLogger(__name__)

# OIDs for common subject fields
_OID_CN = "2.5.4.3"
_OID_EMAIL = "1.2.840.113549.1.9.1"
_OID_ORG = "2.5.4.10"


class NameInfo(TypedDict):
    """Selected fields of an X.509 distinguished name."""

    name: str | None
    email: str | None
    organization: str | None
    dn: str


class CertificateDetails(TypedDict):
    """Human-readable summary of one certificate in the chain."""

    subject: NameInfo
    issuer: NameInfo
    serial_number: str
    not_before: str
    not_after: str
    is_signer: bool
    pem: str


def load_certificates(certificates: Iterable[bytes]) -> list[asn1_x509.Certificate]:
    """Parse DER certificates, forcing the fields chain analysis relies on.

    Raises:
        ParseError: If any certificate cannot be parsed.
    """
    parsed: list[asn1_x509.Certificate] = []
    for index, cert_der in enumerate(certificates):
        try:
            cert = asn1_x509.Certificate.load(cert_der, strict=True)
            # asn1crypto parses lazily; touch the fields used downstream
            _ = cert.subject.hashable, cert.issuer.hashable
            _ = cert.not_valid_before, cert.not_valid_after
        except (ValueError, TypeError, KeyError) as e:
            raise ParseError(f"Failed to parse certificate #{index + 1}: {e}") from e
        parsed.append(cert)
    return parsed


def extract_name_info(name: asn1_x509.Name) -> NameInfo:
    """Extract CN, email, organization and the full DN from a Name."""
    fields: dict[str, str | None] = {"name": None, "email": None, "organization": None}
    oid_map = {_OID_CN: "name", _OID_EMAIL: "email", _OID_ORG: "organization"}

    for rdn in name.chosen:
        for attr in rdn:
            oid = attr["type"].dotted
            if oid in oid_map:
                fields[oid_map[oid]] = attr["value"].native

    return {
        "name": fields["name"],
        "email": fields["email"],
        "organization": fields["organization"],
        "dn": name.human_friendly,
    }


def _extract_details(cert: asn1_x509.Certificate, *, is_signer: bool) -> CertificateDetails:
    return {
        "subject": extract_name_info(cert.subject),
        "issuer": extract_name_info(cert.issuer),
        "serial_number": format(cert.serial_number, "x"),
        "not_before": cert.not_valid_before.isoformat(),
        "not_after": cert.not_valid_after.isoformat(),
        "is_signer": is_signer,
        "pem": asn1_pem.armor("CERTIFICATE", cert.dump()).decode("ascii"),
    }


def extract_certificates_details(
    chain: list[asn1_x509.Certificate],
    signer: asn1_x509.Certificate | None = None,
) -> list[CertificateDetails]:
    """Summarize every certificate of an ordered chain.

    Args:
        chain: Certificates ordered leaf first.
        signer: The certificate that signed the CMS attributes. Defaults to
            the chain leaf.

    Returns:
        One CertificateDetails per certificate, in chain order.
    """
    if signer is None and chain:
        signer = chain[0]
    signer_der = signer.dump() if signer is not None else None
    return [_extract_details(cert, is_signer=cert.dump() == signer_der) for cert in chain]
