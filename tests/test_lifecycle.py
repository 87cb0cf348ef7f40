# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Tests for the claim status table and budget buckets."""

from __future__ import annotations

import itertools

import pytest

from expense_ledger.errors import InvalidTransitionError
from expense_ledger.lifecycle import (
    allowed_targets,
    bucket_for,
    can_transition,
    is_editable,
    is_terminal,
    require_transition,
)
from expense_ledger.types import BudgetBucket, ExpenseStatus

S = ExpenseStatus

LEGAL_PAIRS = {
    (S.SUBMITTED, S.COMPANY_APPROVED),
    (S.SUBMITTED, S.REJECTED),
    (S.COMPANY_APPROVED, S.SCHOOL_LOGGED),
    (S.SCHOOL_LOGGED, S.SCHOOL_APPROVED),
    (S.SCHOOL_APPROVED, S.SCHOOL_PAID),
    (S.REJECTED, S.SUBMITTED),
}

ALL_PAIRS = list(itertools.product(ExpenseStatus, repeat=2))


# ---------------------------------------------------------------------------
# TestTransitionTable
# ---------------------------------------------------------------------------


class TestTransitionTable:
    @pytest.mark.parametrize(("current", "target"), ALL_PAIRS)
    def test_can_transition_matches_table(
        self, current: ExpenseStatus, target: ExpenseStatus
    ) -> None:
        assert can_transition(current, target) is ((current, target) in LEGAL_PAIRS)

    @pytest.mark.parametrize(("current", "target"), ALL_PAIRS)
    def test_require_transition_raises_for_every_illegal_pair(
        self, current: ExpenseStatus, target: ExpenseStatus
    ) -> None:
        if (current, target) in LEGAL_PAIRS:
            require_transition("c-1", current, target)
            return
        with pytest.raises(InvalidTransitionError) as excinfo:
            require_transition("c-1", current, target)
        assert excinfo.value.claim_id == "c-1"
        assert excinfo.value.current is current
        assert excinfo.value.requested is target
        assert excinfo.value.code == "INVALID_TRANSITION"

    def test_self_transition_is_invalid(self) -> None:
        for status in ExpenseStatus:
            assert can_transition(status, status) is False

    def test_submitted_has_two_targets(self) -> None:
        assert allowed_targets(S.SUBMITTED) == frozenset({S.COMPANY_APPROVED, S.REJECTED})

    def test_skipping_a_state_is_invalid(self) -> None:
        assert can_transition(S.SUBMITTED, S.SCHOOL_LOGGED) is False
        assert can_transition(S.COMPANY_APPROVED, S.SCHOOL_PAID) is False

    def test_rejection_only_from_submitted(self) -> None:
        sources = {current for current, target in LEGAL_PAIRS if target is S.REJECTED}
        assert sources == {S.SUBMITTED}

    def test_only_school_paid_is_terminal(self) -> None:
        terminal = [status for status in ExpenseStatus if is_terminal(status)]
        assert terminal == [S.SCHOOL_PAID]

    def test_error_message_names_both_states(self) -> None:
        with pytest.raises(InvalidTransitionError, match="school_paid.*submitted"):
            require_transition("c-9", S.SCHOOL_PAID, S.SUBMITTED)


# ---------------------------------------------------------------------------
# TestBuckets
# ---------------------------------------------------------------------------


class TestBuckets:
    def test_pending_bucket(self) -> None:
        assert bucket_for(S.COMPANY_APPROVED) is BudgetBucket.PENDING
        assert bucket_for(S.SCHOOL_LOGGED) is BudgetBucket.PENDING

    def test_spent_bucket(self) -> None:
        assert bucket_for(S.SCHOOL_APPROVED) is BudgetBucket.SPENT
        assert bucket_for(S.SCHOOL_PAID) is BudgetBucket.SPENT

    def test_submitted_and_rejected_count_nowhere(self) -> None:
        assert bucket_for(S.SUBMITTED) is BudgetBucket.NONE
        assert bucket_for(S.REJECTED) is BudgetBucket.NONE

    def test_every_status_has_exactly_one_bucket(self) -> None:
        for status in ExpenseStatus:
            assert isinstance(bucket_for(status), BudgetBucket)

    def test_editable_until_spent(self) -> None:
        editable = {status for status in ExpenseStatus if is_editable(status)}
        assert editable == {S.SUBMITTED, S.REJECTED, S.COMPANY_APPROVED, S.SCHOOL_LOGGED}


# ---------------------------------------------------------------------------
# TestLabels
# ---------------------------------------------------------------------------


class TestLabels:
    def test_labels_are_distinct_from_identifiers(self) -> None:
        for status in ExpenseStatus:
            assert status.label() != status.value

    def test_status_round_trips_from_identifier(self) -> None:
        assert ExpenseStatus("school_logged") is S.SCHOOL_LOGGED
