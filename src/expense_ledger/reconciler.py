# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
Budget reconciliation.

Every figure here is a pure function of the claim collection and the project
records. Nothing is cached or patched incrementally: callers re-run the
reconciliation after each mutation and replace their previous figures
wholesale.

Amounts are Decimals and sums are exact, so every result is independent of
the order claims or adjustments are supplied in, and the conservation
equation ``spent + pending + remaining == budget`` holds exactly.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from expense_ledger.lifecycle import bucket_for
from expense_ledger.types import (
    BudgetBucket,
    CategoryFigures,
    Expense,
    PortfolioSummary,
    Project,
    ProjectFigures,
    money_sum,
)


# ---------------------------------------------------------------------------
# Partitioning
# ---------------------------------------------------------------------------


def claims_for_project(project_id: str, claims: Iterable[Expense]) -> list[Expense]:
    return [claim for claim in claims if claim.project_id == project_id]


def bucket_totals(claims: Iterable[Expense]) -> tuple[Decimal, Decimal]:
    """
    Sum claim totals by budget bucket.

    Each claim lands in exactly one bucket (pending, spent or none), so no
    claim is ever counted twice.

    Returns:
        ``(spent, pending)`` for the given claims.
    """
    spent_amounts: list[Decimal] = []
    pending_amounts: list[Decimal] = []
    for claim in claims:
        bucket = bucket_for(claim.status)
        if bucket is BudgetBucket.SPENT:
            spent_amounts.append(claim.total_amount)
        elif bucket is BudgetBucket.PENDING:
            pending_amounts.append(claim.total_amount)
    return money_sum(spent_amounts), money_sum(pending_amounts)


def manual_total(project: Project) -> Decimal:
    """Signed sum of the project's manual adjustments. Refunds are negative."""
    return money_sum(adjustment.amount for adjustment in project.adjustments)


def _utilization(used: Decimal, budget: Decimal) -> float:
    if budget <= 0:
        return 0.0
    return float(used / budget * 100)


# ---------------------------------------------------------------------------
# Per-project
# ---------------------------------------------------------------------------


def reconcile_categories(
    project: Project,
    claims: Iterable[Expense],
) -> tuple[CategoryFigures, ...]:
    """
    Compute per-category spend for one project.

    Reported categories are those with a cap on the project plus any category
    that has at least one claim in the pending or spent bucket. Over-cap flags
    are informational; they never block a claim.
    """
    by_category: dict[str, list[Expense]] = {}
    for claim in claims_for_project(project.id, claims):
        if bucket_for(claim.status) is BudgetBucket.NONE:
            continue
        by_category.setdefault(claim.category, []).append(claim)

    category_ids = set(by_category)
    category_ids.update(
        category for category in project.category_budgets if project.cap_for(category)
    )

    figures: list[CategoryFigures] = []
    for category in sorted(category_ids):
        spent, pending = bucket_totals(by_category.get(category, []))
        committed = spent + pending
        cap = project.cap_for(category)
        figures.append(
            CategoryFigures(
                category=category,
                cap=cap,
                spent=spent,
                pending=pending,
                committed=committed,
                over_cap=cap is not None and committed > cap,
            )
        )
    return tuple(figures)


def reconcile_project(project: Project, claims: Iterable[Expense]) -> ProjectFigures:
    """
    Derive ``spent``, ``pending`` and ``remaining`` for one project.

    - spent     = school approved/paid claim totals + manual adjustments
    - pending   = company approved/school logged claim totals
    - remaining = budget - spent - pending  (may be negative; never clamped)

    Submitted and rejected claims count towards neither figure.
    """
    own_claims = claims_for_project(project.id, claims)
    expense_spent, expense_pending = bucket_totals(own_claims)
    manual_spent = manual_total(project)

    spent = expense_spent + manual_spent
    pending = expense_pending
    remaining = project.budget - spent - pending

    return ProjectFigures(
        project_id=project.id,
        budget=project.budget,
        expense_spent=expense_spent,
        expense_pending=expense_pending,
        manual_spent=manual_spent,
        spent=spent,
        pending=pending,
        remaining=remaining,
        over_budget=remaining < 0,
        utilization_percent=_utilization(spent + pending, project.budget),
        categories=reconcile_categories(project, own_claims),
    )


# ---------------------------------------------------------------------------
# Portfolio
# ---------------------------------------------------------------------------


def reconcile_all(
    projects: Iterable[Project],
    claims: Sequence[Expense],
) -> dict[str, ProjectFigures]:
    """Reconcile every project in one pass, keyed by project id."""
    return {project.id: reconcile_project(project, claims) for project in projects}


def summarize(figures: Iterable[ProjectFigures]) -> PortfolioSummary:
    """
    Aggregate per-project figures into portfolio totals.

    Totals are summed from the reconciled figures, so the conservation
    equation holds for the portfolio exactly as it does per project.
    """
    ordered = tuple(figures)
    total_budget = money_sum(item.budget for item in ordered)
    total_spent = money_sum(item.spent for item in ordered)
    total_pending = money_sum(item.pending for item in ordered)
    return PortfolioSummary(
        total_budget=total_budget,
        total_spent=total_spent,
        total_pending=total_pending,
        total_remaining=total_budget - total_spent - total_pending,
        utilization_percent=_utilization(total_spent + total_pending, total_budget),
        project_count=len(ordered),
        projects=ordered,
    )
