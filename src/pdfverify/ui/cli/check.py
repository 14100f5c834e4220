"""Embedded signature check command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from ...core.verify import verify_pdf

if TYPE_CHECKING:
    import argparse

    from ...core.verify import VerificationResult


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


def format_result_lines(result: VerificationResult) -> list[str]:
    """Render a verification result as indented report lines."""
    lines: list[str] = []
    if result["error"] is not None:
        lines.append(f"Error ({result['error'].kind}): {result['message']}")
    else:
        lines.append(f"Integrity:    {_yes_no(result['integrity'])}")
        lines.append(f"Authenticity: {_yes_no(result['authenticity'])}")
        lines.append(f"Expired:      {_yes_no(result['expired'])}")

    meta = result["meta"]
    if meta["structure"]:
        lines.append(f"pikepdf: {meta['structure']}")

    signature_meta = meta["signature_meta"]
    if signature_meta:
        labels = (("reason", "Reason"), ("contact_info", "Contact"), ("location", "Location"))
        for key, label in labels:
            value = signature_meta[key]
            if value:
                lines.append(f"{label}: {value}")

    certs = meta["certs"]
    if certs:
        lines.append(f"Certificates ({len(certs)}):")
        for i, cert in enumerate(certs, 1):
            marker = " (signer)" if cert["is_signer"] else ""
            lines.append(f"  [{i}] {cert['subject']['dn']}{marker}")
            lines.append(f"      Issuer: {cert['issuer']['dn']}")
            lines.append(f"      Valid:  {cert['not_before']} - {cert['not_after']}")
    return lines


def cmd_check(args: argparse.Namespace) -> None:
    """Verify the last embedded signature of a PDF."""
    pdf_path = Path(args.pdf)

    if not pdf_path.exists():
        print(f"Error: {pdf_path} not found", file=sys.stderr)
        sys.exit(1)

    try:
        pdf_bytes = pdf_path.read_bytes()
    except OSError as e:
        print(f"Error: cannot read {pdf_path}: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Checking {pdf_path.name} ({len(pdf_bytes)} bytes)...")
    result = verify_pdf(pdf_bytes)

    for line in format_result_lines(result):
        print(f"  {line}")

    print()
    if result["verified"]:
        print("  RESULT: Signature VALID")
    else:
        print("  RESULT: Signature INVALID")
        sys.exit(1)
