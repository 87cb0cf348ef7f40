# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
Expense claim status machine.

Claims only move on an explicit reviewer action. The happy path is linear::

    submitted -> company_approved -> school_logged -> school_approved -> school_paid

A submitted claim may instead be rejected, and a rejected claim may be reset
to submitted. Every other pair is invalid.
"""
from __future__ import annotations

from expense_ledger.errors import InvalidTransitionError
from expense_ledger.types import BudgetBucket, ExpenseStatus

TRANSITIONS: dict[ExpenseStatus, frozenset[ExpenseStatus]] = {
    ExpenseStatus.SUBMITTED: frozenset(
        {ExpenseStatus.COMPANY_APPROVED, ExpenseStatus.REJECTED}
    ),
    ExpenseStatus.COMPANY_APPROVED: frozenset({ExpenseStatus.SCHOOL_LOGGED}),
    ExpenseStatus.SCHOOL_LOGGED: frozenset({ExpenseStatus.SCHOOL_APPROVED}),
    ExpenseStatus.SCHOOL_APPROVED: frozenset({ExpenseStatus.SCHOOL_PAID}),
    ExpenseStatus.SCHOOL_PAID: frozenset(),
    ExpenseStatus.REJECTED: frozenset({ExpenseStatus.SUBMITTED}),
}

BUCKETS: dict[ExpenseStatus, BudgetBucket] = {
    ExpenseStatus.SUBMITTED: BudgetBucket.NONE,
    ExpenseStatus.COMPANY_APPROVED: BudgetBucket.PENDING,
    ExpenseStatus.SCHOOL_LOGGED: BudgetBucket.PENDING,
    ExpenseStatus.SCHOOL_APPROVED: BudgetBucket.SPENT,
    ExpenseStatus.SCHOOL_PAID: BudgetBucket.SPENT,
    ExpenseStatus.REJECTED: BudgetBucket.NONE,
}


def allowed_targets(status: ExpenseStatus) -> frozenset[ExpenseStatus]:
    """Return the statuses reachable from ``status`` in one step."""
    return TRANSITIONS[status]


def can_transition(current: ExpenseStatus, target: ExpenseStatus) -> bool:
    return target in TRANSITIONS[current]


def require_transition(
    claim_id: str,
    current: ExpenseStatus,
    target: ExpenseStatus,
) -> None:
    """
    Validate one status change.

    Raises:
        InvalidTransitionError: If ``(current, target)`` is not in the table.
    """
    if not can_transition(current, target):
        raise InvalidTransitionError(claim_id=claim_id, current=current, requested=target)


def bucket_for(status: ExpenseStatus) -> BudgetBucket:
    """Return the budget bucket a claim in ``status`` counts towards."""
    return BUCKETS[status]


def is_terminal(status: ExpenseStatus) -> bool:
    return not TRANSITIONS[status]


def is_editable(status: ExpenseStatus) -> bool:
    """A claim stays editable until its amount has been consumed."""
    return BUCKETS[status] is not BudgetBucket.SPENT
