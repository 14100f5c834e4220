"""Shared test fixtures for the pdfverify test suite."""

from __future__ import annotations

import pytest

from factories import Identity, blank_pdf, make_identity, sign_pdf


@pytest.fixture(scope="session")
def signer() -> Identity:
    """Self-signed, currently valid signer."""
    return make_identity("Test Signer")


@pytest.fixture(scope="session")
def ca_chain() -> tuple[Identity, Identity, Identity]:
    """(leaf, intermediate, root) -- a valid three-level chain."""
    root = make_identity("Test Root CA", ca=True)
    intermediate = make_identity("Test Intermediate CA", issuer=root, ca=True)
    leaf = make_identity("Test Leaf", issuer=intermediate)
    return leaf, intermediate, root


@pytest.fixture(scope="session")
def valid_pdf_bytes() -> bytes:
    return blank_pdf()


@pytest.fixture(scope="session")
def signed_pdf(signer: Identity, valid_pdf_bytes: bytes) -> bytes:
    return sign_pdf(signer, base=valid_pdf_bytes)
