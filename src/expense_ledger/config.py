# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field

from expense_ledger.types import Category, Money, Project, ProjectType

DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="office", name="Office supplies", icon="✏️"),
    Category(id="travel", name="Domestic travel", icon="🚄"),
    Category(id="equipment", name="Equipment purchase", icon="💻"),
    Category(id="meal", name="Meals", icon="🍱"),
    Category(id="consumable", name="Lab consumables", icon="🧪"),
    Category(id="maintenance", name="Maintenance", icon="🔧"),
)

# Suggestions for the payer field only; never validated against.
DEFAULT_EMPLOYEES: tuple[str, ...] = (
    "Wang (assistant)",
    "Prof. Chen (PI)",
    "Li (graduate student)",
    "Chang (administration)",
)

ALL_CATEGORY_IDS: frozenset[str] = frozenset(category.id for category in DEFAULT_CATEGORIES)


def default_projects() -> list[Project]:
    """
    Return the seed project list.

    Includes an ``undecided`` holding project with a zero budget for claims
    whose funding source has not been settled yet.
    """
    return [
        Project(
            id="undecided",
            code="PENDING-DECISION",
            name="Undecided (awaiting assignment)",
            type=ProjectType.DEPARTMENT,
            budget=0.0,
            allowed_categories=ALL_CATEGORY_IDS,
        ),
        Project(
            id="p1",
            code="113-2221-E-006-001",
            name="AI medical imaging research grant",
            type=ProjectType.GRANT,
            budget=1_500_000.0,
            allowed_categories=frozenset({"office", "travel", "consumable", "equipment"}),
        ),
        Project(
            id="p2",
            code="113-A001-002",
            name="Factory automation industry project",
            type=ProjectType.INDUSTRY,
            budget=500_000.0,
            allowed_categories=ALL_CATEGORY_IDS,
        ),
        Project(
            id="p3",
            code="D-006-ADMIN",
            name="Department administration fund",
            type=ProjectType.DEPARTMENT,
            budget=200_000.0,
            allowed_categories=frozenset({"office", "meal", "maintenance"}),
        ),
    ]


class AdvisoryConfig(BaseModel, frozen=True):
    """
    Configuration for the ExpenseAdvisor.

    Attributes:
        timeout_seconds: Upper bound on one advisory call. On expiry the
            fallback text is returned.
        quote_threshold: Amount above which the prompt reminds reviewers that
            a vendor quote is usually needed.
        disabled_text: Returned when no advisory client is configured.
        empty_text: Returned when the client answers with empty text.
        fallback_text: Returned when the client fails or times out.
    """

    timeout_seconds: Annotated[float, Field(gt=0)] = 10.0
    quote_threshold: Annotated[Money, Field(ge=0)] = Decimal("2000")
    disabled_text: str = "Advisory check is not configured; please review the claim manually."
    empty_text: str = "Check complete, no particular advice."
    fallback_text: str = "Advisory service unavailable; the claim was not checked."


class LedgerConfig(BaseModel, frozen=True):
    """
    Top-level configuration for the ExpenseLedger.

    All fields are optional; defaults match the reference deployment.

    Attributes:
        purchase_request_threshold: Claims whose total is strictly above this
            amount are flagged as requiring a purchase request.
        categories: Category catalog (id to display name).
        employees: Payer name suggestions for the submission form.
        privileged_author: Attribution used for notes written by a privileged
            caller.
        system_author: Attribution used for notes written by the ledger itself
            or by a non-privileged caller.
        advisory: Settings for the advisory oracle.

    Example::

        config = LedgerConfig(purchase_request_threshold=20_000.0)
        ledger = ExpenseLedger(config=config)
    """

    purchase_request_threshold: Annotated[Money, Field(gt=0)] = Decimal("15000")
    categories: tuple[Category, ...] = DEFAULT_CATEGORIES
    employees: tuple[str, ...] = DEFAULT_EMPLOYEES
    privileged_author: str = "Administrator"
    system_author: str = "System"
    advisory: AdvisoryConfig = Field(default_factory=AdvisoryConfig)

    def category_name(self, category_id: str) -> str:
        """Return the display name for ``category_id``, or the id itself."""
        for category in self.categories:
            if category.id == category_id:
                return category.name
        return category_id

    def category_names(self) -> dict[str, str]:
        return {category.id: category.name for category in self.categories}
