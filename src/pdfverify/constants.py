"""
Application-wide constants for pdfverify.

Retry budgets, supported signature types, OIDs, and environment variable
names are centralized here for easy maintenance and configuration.
"""

from __future__ import annotations

import importlib.metadata

try:
    __version__ = importlib.metadata.version("pdfverify")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "BYTERANGE_MARKERS",
    "DEFAULT_MAX_PADDING_RETRIES",
    "ENV_MAX_RETRIES",
    "ENV_STRUCTURE_CHECK",
    "MAX_PADDING_RETRIES",
    "OID_MESSAGE_DIGEST",
    "SUPPORTED_SUBFILTERS",
    "__version__",
]

# ── PDF markers ───────────────────────────────────────────────────────

# Searched in this order; the last occurrence of the first form that
# appears anywhere in the buffer wins.
BYTERANGE_MARKERS = (b"/ByteRange[", b"/ByteRange [")

# Detached CMS signature types we can interpret
SUPPORTED_SUBFILTERS = frozenset({"adbe.pkcs7.detached", "etsi.cades.detached"})


# ── Envelope decoding ─────────────────────────────────────────────────

# Upper bound on zero bytes re-appended to a stripped envelope.
# A DER length field can account for at most 255 bytes of trailing padding
# that the hex stripping step removed.
MAX_PADDING_RETRIES = 255

DEFAULT_MAX_PADDING_RETRIES = MAX_PADDING_RETRIES


# ── OIDs ──────────────────────────────────────────────────────────────

# messageDigest attribute in CMS SignerInfo.signedAttrs
OID_MESSAGE_DIGEST = "1.2.840.113549.1.9.4"


# ── Environment variable names ──────────────────────────────────────

ENV_MAX_RETRIES = "PDFVERIFY_MAX_RETRIES"
ENV_STRUCTURE_CHECK = "PDFVERIFY_STRUCTURE_CHECK"
