# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""
Certificate chain ordering, authenticity and expiry checks.

The certificate set carried in a CMS envelope is unordered.  It is treated
as a graph keyed by subject/issuer names and walked from the one
certificate that issues nothing (the leaf) up to a self-issued root or a
certificate whose issuer is not in the set.  Chains are ordered leaf first.
"""

from __future__ import annotations

__all__ = [
    "ChainAnalysis",
    "analyze_chain",
    "authenticate_chain",
    "is_chain_expired",
    "sort_certificate_chain",
]

import datetime
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from asn1crypto import x509 as asn1_x509
from cryptography import x509 as crypto_x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm

from ..errors import CertificateChainError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChainAnalysis:
    """Outcome of analyzing an embedded certificate set."""

    chain: list[asn1_x509.Certificate]
    authenticity: bool
    expired: bool


def _dedupe(certs: Sequence[asn1_x509.Certificate]) -> list[asn1_x509.Certificate]:
    seen: set[bytes] = set()
    unique: list[asn1_x509.Certificate] = []
    for cert in certs:
        der = cert.dump()
        if der not in seen:
            seen.add(der)
            unique.append(cert)
    return unique


def sort_certificate_chain(certs: Sequence[asn1_x509.Certificate]) -> list[asn1_x509.Certificate]:
    """
    Order a certificate set into a single chain, leaf first.

    Identical certificates are collapsed before ordering.

    Args:
        certs: Parsed certificates in any order.

    Returns:
        Certificates ordered leaf, intermediate(s)..., root.

    Raises:
        CertificateChainError: If the set is empty, two certificates share a
            subject, or the issuer graph is cyclic or disconnected.
    """
    unique = _dedupe(certs)
    if not unique:
        raise CertificateChainError("No certificates to order.")

    by_subject: dict[str, asn1_x509.Certificate] = {}
    for cert in unique:
        key = cert.subject.hashable
        if key in by_subject:
            raise CertificateChainError(
                f"Ambiguous chain: subject {cert.subject.human_friendly!r} appears twice"
            )
        by_subject[key] = cert

    issuer_keys = {cert.issuer.hashable for cert in unique if not cert.self_issued}
    leaves = [cert for cert in unique if cert.subject.hashable not in issuer_keys]
    if not leaves:
        raise CertificateChainError("Ambiguous chain: certificates issue each other in a cycle")
    if len(leaves) > 1:
        names = ", ".join(repr(cert.subject.human_friendly) for cert in leaves)
        raise CertificateChainError(f"Ambiguous chain: multiple leaf certificates ({names})")

    current = leaves[0]
    chain = [current]
    visited = {current.subject.hashable}
    while not current.self_issued:
        issuer = by_subject.get(current.issuer.hashable)
        if issuer is None:
            break
        if issuer.subject.hashable in visited:
            raise CertificateChainError("Ambiguous chain: issuer cycle detected")
        visited.add(issuer.subject.hashable)
        chain.append(issuer)
        current = issuer

    if len(chain) != len(unique):
        stray = [cert for cert in unique if cert.subject.hashable not in visited]
        names = ", ".join(repr(cert.subject.human_friendly) for cert in stray)
        raise CertificateChainError(f"Disconnected chain: unreachable certificate(s) {names}")

    return chain


def _verify_link(subject: asn1_x509.Certificate, issuer: asn1_x509.Certificate) -> bool:
    """Check that ``subject`` carries a valid signature by ``issuer``."""
    try:
        subject_cert = crypto_x509.load_der_x509_certificate(subject.dump())
        issuer_cert = crypto_x509.load_der_x509_certificate(issuer.dump())
        subject_cert.verify_directly_issued_by(issuer_cert)
    except (InvalidSignature, UnsupportedAlgorithm, ValueError, TypeError) as e:
        _logger.warning(
            "Certificate %r is not validly signed by %r: %s",
            subject.subject.human_friendly,
            issuer.subject.human_friendly,
            str(e) or type(e).__name__,
        )
        return False
    return True


def authenticate_chain(chain: Sequence[asn1_x509.Certificate]) -> bool:
    """
    Verify every issuer link of an ordered chain.

    A self-issued top certificate must verify against its own key.  A top
    certificate whose issuer is not part of the chain is accepted as the
    trust anchor; no external trust store is consulted.

    Args:
        chain: Certificates ordered leaf first.

    Returns:
        True if every link verifies.
    """
    if not chain:
        return False

    for subject, issuer in zip(chain, chain[1:]):
        if not _verify_link(subject, issuer):
            return False

    top = chain[-1]
    if top.self_issued:
        return _verify_link(top, top)

    _logger.debug(
        "Issuer %r of top certificate not embedded; treating %r as trust anchor",
        top.issuer.human_friendly,
        top.subject.human_friendly,
    )
    return True


def is_chain_expired(
    chain: Sequence[asn1_x509.Certificate],
    now: datetime.datetime | None = None,
) -> bool:
    """Return True if any certificate is outside its validity window at ``now``.

    Naive ``now`` values are taken as UTC.
    """
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc)

    expired = False
    for cert in chain:
        not_before = cert.not_valid_before
        not_after = cert.not_valid_after
        if now < not_before:
            _logger.warning(
                "Certificate %r is not yet valid (notBefore: %s)",
                cert.subject.human_friendly,
                not_before,
            )
            expired = True
        elif now > not_after:
            _logger.warning(
                "Certificate %r has expired (notAfter: %s)",
                cert.subject.human_friendly,
                not_after,
            )
            expired = True
    return expired


def analyze_chain(
    certs: Sequence[asn1_x509.Certificate],
    now: datetime.datetime | None = None,
) -> ChainAnalysis:
    """Order a certificate set and check its authenticity and expiry.

    Raises:
        CertificateChainError: If the set cannot be ordered into one chain.
    """
    chain = sort_certificate_chain(certs)
    return ChainAnalysis(
        chain=chain,
        authenticity=authenticate_chain(chain),
        expired=is_chain_expired(chain, now),
    )
