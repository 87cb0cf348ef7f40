# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Optional

from pydantic import BaseModel

from expense_ledger.types import Expense, ExpenseStatus, Money, Project


class ClaimFilter(BaseModel):
    """Optional filter applied to claim queries. All fields are AND-ed."""

    project_id: Optional[str] = None
    status: Optional[ExpenseStatus] = None
    category: Optional[str] = None
    search: Optional[str] = None
    min_amount: Optional[Money] = None
    max_amount: Optional[Money] = None


def search_text(
    claim: Expense,
    projects: Mapping[str, Project] | None = None,
    category_names: Mapping[str, str] | None = None,
) -> str:
    """
    Build the lower-cased text a free-text search is matched against:
    invoice number, project name, payer name, first item name, category name.
    """
    project = (projects or {}).get(claim.project_id)
    parts = [
        claim.invoice_number or "",
        project.name if project is not None else "",
        claim.payer_name or "",
        claim.items[0].name if claim.items else "",
        (category_names or {}).get(claim.category, claim.category),
    ]
    return " ".join(parts).lower()


def filter_claims(
    claims: Iterable[Expense],
    claim_filter: ClaimFilter | None,
    projects: Mapping[str, Project] | None = None,
    category_names: Mapping[str, str] | None = None,
) -> list[Expense]:
    """
    Apply an optional ClaimFilter to a sequence of claims.
    Returns a new list in input order; the input is not modified.
    """
    if claim_filter is None:
        return list(claims)

    needle = (claim_filter.search or "").strip().lower()

    results: list[Expense] = []
    for claim in claims:
        if claim_filter.project_id is not None and claim.project_id != claim_filter.project_id:
            continue
        if claim_filter.status is not None and claim.status is not claim_filter.status:
            continue
        if claim_filter.category is not None and claim.category != claim_filter.category:
            continue
        if claim_filter.min_amount is not None and claim.total_amount < claim_filter.min_amount:
            continue
        if claim_filter.max_amount is not None and claim.total_amount > claim_filter.max_amount:
            continue
        if needle and needle not in search_text(claim, projects, category_names):
            continue
        results.append(claim)

    return results
