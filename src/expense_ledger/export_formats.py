# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Export helpers: serialise claim lists to JSON and CSV.

- JSON: standard JSON array of full claim records, 2-space indentation.
- CSV:  one row per claim with a header row; human labels for project,
        payment method and status.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Mapping

from expense_ledger.types import Expense, PaymentMethod, Project

# ---------------------------------------------------------------------------
# JSON export
# ---------------------------------------------------------------------------


def export_json(claims: list[Expense]) -> str:
    """Serialise claims to a JSON array string with 2-space indentation."""
    return json.dumps(
        [claim.model_dump(mode="json") for claim in claims],
        indent=2,
        ensure_ascii=False,
    )


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------

CSV_COLUMNS: list[str] = [
    "date",
    "invoice_number",
    "project",
    "category",
    "item",
    "total_amount",
    "payment",
    "status",
]


def _payment_text(claim: Expense) -> str:
    if claim.payment_method is PaymentMethod.ADVANCE:
        return f"{claim.payment_method.label()}: {claim.payer_name or ''}"
    return f"{claim.payment_method.label()}: {claim.vendor_tax_id or ''}"


def _claim_to_csv_row(
    claim: Expense,
    projects: Mapping[str, Project],
    category_names: Mapping[str, str],
) -> list[str]:
    project = projects.get(claim.project_id)
    return [
        claim.invoice_date.isoformat(),
        claim.invoice_number or "",
        project.name if project is not None else claim.project_id,
        category_names.get(claim.category, claim.category),
        claim.items[0].name if claim.items else "",
        f"{claim.total_amount:.2f}",
        _payment_text(claim),
        claim.status.label(),
    ]


def export_csv(
    claims: list[Expense],
    projects: Mapping[str, Project] | None = None,
    category_names: Mapping[str, str] | None = None,
) -> str:
    """
    Serialise claims to CSV format.

    The first row contains column headers. Unknown project or category ids
    are written as-is.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for claim in claims:
        writer.writerow(_claim_to_csv_row(claim, projects or {}, category_names or {}))
    return buffer.getvalue()
