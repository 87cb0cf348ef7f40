# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Shared fixtures for expense-ledger tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from expense_ledger.ledger import ExpenseLedger
from expense_ledger.storage.memory import MemoryStorage
from expense_ledger.types import (
    ClaimDraft,
    LineItemInput,
    PaymentMethod,
    Project,
    ProjectType,
)


@pytest.fixture
def small_project() -> Project:
    """Project 'P' with a 10 000 budget allowing office and travel claims."""
    return Project(
        id="P",
        code="P-001",
        name="Small grant",
        type=ProjectType.GRANT,
        budget=10_000.0,
        allowed_categories=frozenset({"office", "travel", "meal"}),
        category_budgets={"travel": 2_000.0, "office": 0.0},
    )


@pytest.fixture
def large_project() -> Project:
    """Project 'L' with a 100 000 budget and every default category."""
    return Project(
        id="L",
        code="L-001",
        name="Industry collaboration",
        type=ProjectType.INDUSTRY,
        budget=100_000.0,
        allowed_categories=frozenset(
            {"office", "travel", "equipment", "meal", "consumable", "maintenance"}
        ),
    )


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def ledger(
    small_project: Project,
    large_project: Project,
    storage: MemoryStorage,
) -> ExpenseLedger:
    """A ledger holding projects 'P' and 'L' with no claims."""
    return ExpenseLedger(storage=storage, projects=[small_project, large_project])


@pytest.fixture
def make_draft() -> Callable[..., ClaimDraft]:
    """Factory for a single-item Advance draft with the given total."""

    def _make(
        total: float = 3_000.0,
        project_id: str = "P",
        category: str = "office",
        quantity: int = 1,
        **overrides: object,
    ) -> ClaimDraft:
        fields: dict[str, object] = {
            "project_id": project_id,
            "category": category,
            "items": [
                LineItemInput(name="Printer toner", unit_price=total / quantity, quantity=quantity)
            ],
            "payment_method": PaymentMethod.ADVANCE,
            "payer_name": "Wang (assistant)",
            "invoice_number": "AB-00000001",
        }
        fields.update(overrides)
        return ClaimDraft(**fields)

    return _make
