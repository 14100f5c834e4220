"""
Verification options for pdfverify.

Options can be passed explicitly to :func:`pdfverify.verify_pdf`; when
omitted they are resolved from environment variables with the built-in
defaults as fallback.
"""

from __future__ import annotations

__all__ = [
    "VerifyOptions",
    "get_verify_options",
]

import datetime
import logging
import os
from dataclasses import dataclass

from .constants import (
    DEFAULT_MAX_PADDING_RETRIES,
    ENV_MAX_RETRIES,
    ENV_STRUCTURE_CHECK,
    MAX_PADDING_RETRIES,
)

_logger = logging.getLogger(__name__)

_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class VerifyOptions:
    """Options controlling a single verification run.

    Attributes:
        max_padding_retries: How many zero bytes may be re-appended to a
            stripped CMS envelope before decoding is abandoned.
        structure_check: Open the document with pikepdf and report its
            structure in the result metadata (informational only).
        now: Reference time for certificate expiry checks. ``None`` means
            the current UTC time at verification.
    """

    max_padding_retries: int = DEFAULT_MAX_PADDING_RETRIES
    structure_check: bool = True
    now: datetime.datetime | None = None


def _resolve_max_retries() -> int:
    raw = os.environ.get(ENV_MAX_RETRIES, "").strip()
    if not raw:
        return DEFAULT_MAX_PADDING_RETRIES
    try:
        value = int(raw)
    except ValueError:
        _logger.warning("Invalid %s value: %r, using default", ENV_MAX_RETRIES, raw)
        return DEFAULT_MAX_PADDING_RETRIES
    if value < 0 or value > MAX_PADDING_RETRIES:
        _logger.warning(
            "%s=%d out of range [0, %d], using default",
            ENV_MAX_RETRIES,
            value,
            MAX_PADDING_RETRIES,
        )
        return DEFAULT_MAX_PADDING_RETRIES
    return value


def get_verify_options() -> VerifyOptions:
    """
    Resolve verification options from the environment.

    Priority: env vars > built-in defaults.

    Returns:
        VerifyOptions with ``now`` left unset (current time).
    """
    structure_raw = os.environ.get(ENV_STRUCTURE_CHECK, "").strip().lower()
    return VerifyOptions(
        max_padding_retries=_resolve_max_retries(),
        structure_check=structure_raw not in _FALSE_VALUES,
    )
