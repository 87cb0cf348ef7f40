# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, Field, computed_field, field_validator

# ─── Money ────────────────────────────────────────────────────────────────────


def to_money(value: Any) -> Any:
    """
    Convert a caller-supplied amount to an exact Decimal.

    Floats go through their shortest ``repr`` so ``0.1`` becomes
    ``Decimal("0.1")`` rather than the binary approximation. Values of other
    types are returned unchanged for pydantic to reject.

    Raises:
        ValueError: If the amount is not a number, or is infinite or NaN.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        return value
    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, float):
            amount = Decimal(repr(value))
        else:
            amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"{value!r} is not a valid amount") from exc
    if not amount.is_finite():
        raise ValueError("amounts must be finite")
    return amount


def money_sum(amounts: Iterable[Decimal]) -> Decimal:
    """Exact sum of Decimal amounts; the result does not depend on order."""
    return sum(amounts, Decimal("0"))


Money = Annotated[Decimal, BeforeValidator(to_money), Field(allow_inf_nan=False)]

# ─── Enumerations ─────────────────────────────────────────────────────────────


class ExpenseStatus(str, Enum):
    """
    Lifecycle state of an expense claim.

    Values are stable identifiers; use ``label()`` for display text.
    """

    SUBMITTED = "submitted"
    COMPANY_APPROVED = "company_approved"
    SCHOOL_LOGGED = "school_logged"
    SCHOOL_APPROVED = "school_approved"
    SCHOOL_PAID = "school_paid"
    REJECTED = "rejected"

    def label(self) -> str:
        """Return a human-readable label for this status."""
        return _STATUS_LABELS[self]


_STATUS_LABELS: dict[ExpenseStatus, str] = {
    ExpenseStatus.SUBMITTED: "Submitted",
    ExpenseStatus.COMPANY_APPROVED: "Company approved (reserved)",
    ExpenseStatus.SCHOOL_LOGGED: "Logged with school",
    ExpenseStatus.SCHOOL_APPROVED: "School approved (deducted)",
    ExpenseStatus.SCHOOL_PAID: "School paid (closed)",
    ExpenseStatus.REJECTED: "Returned for correction",
}


class ProjectType(str, Enum):
    """Funding source of a project. Drives advisory rules only."""

    GRANT = "grant"
    INDUSTRY = "industry"
    DEPARTMENT = "department"

    def label(self) -> str:
        """Return a human-readable label for this project type."""
        return {
            ProjectType.GRANT: "Research grant",
            ProjectType.INDUSTRY: "Industry collaboration",
            ProjectType.DEPARTMENT: "Department fund",
        }[self]


class PaymentMethod(str, Enum):
    """How a claim is settled."""

    ADVANCE = "advance"
    DIRECT = "direct"

    def label(self) -> str:
        """Return a human-readable label for this payment method."""
        return {
            PaymentMethod.ADVANCE: "Advance (payer reimbursed)",
            PaymentMethod.DIRECT: "Direct (paid to vendor)",
        }[self]


class BudgetBucket(str, Enum):
    """Which budget figure a claim's total counts towards."""

    PENDING = "pending"
    SPENT = "spent"
    NONE = "none"


# ─── Catalog ──────────────────────────────────────────────────────────────────


class Category(BaseModel, frozen=True):
    """An expense category from the configured catalog."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    icon: str = ""


# ─── Project ──────────────────────────────────────────────────────────────────


class BudgetAdjustment(BaseModel, frozen=True):
    """
    A manual ledger correction against a project's spent total.

    Positive amounts increase spent; negative amounts are refunds. Entries
    are never edited or removed; corrections use an offsetting entry.
    """

    id: str
    date: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    amount: Money
    reason: str = Field(..., min_length=1)
    user: str = ""


class Project(BaseModel, frozen=True):
    """
    A budget-holding unit.

    Attributes:
        id: Stable unique identifier.
        code: Human accounting code, unique across the registry.
        name: Display name.
        type: Funding source.
        budget: Base allocation. Never negative.
        category_budgets: Optional per-category caps. 0 or absent means
            unlimited.
        allowed_categories: Categories claims may be filed under.
        adjustments: Append-only manual ledger entries.
    """

    id: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)
    name: str
    type: ProjectType
    budget: Money = Field(..., ge=0)
    category_budgets: dict[str, Optional[Money]] = Field(default_factory=dict)
    allowed_categories: frozenset[str] = Field(default_factory=frozenset)
    adjustments: tuple[BudgetAdjustment, ...] = ()

    @field_validator("category_budgets")
    @classmethod
    def caps_must_not_be_negative(
        cls, value: dict[str, Optional[Money]]
    ) -> dict[str, Optional[Money]]:
        for category, cap in value.items():
            if cap is not None and cap < 0:
                raise ValueError(f"category cap for {category!r} must be >= 0")
        return value

    def cap_for(self, category: str) -> Decimal | None:
        """Return the effective cap for ``category``, or None when unlimited."""
        cap = self.category_budgets.get(category)
        if not cap:
            return None
        return cap

    def allows(self, category: str) -> bool:
        return category in self.allowed_categories


# ─── Claim ────────────────────────────────────────────────────────────────────


class InvoiceItem(BaseModel, frozen=True):
    """One invoice line. ``amount`` is always ``unit_price * quantity``."""

    name: str = ""
    unit_price: Money = Field(..., ge=0)
    quantity: int = Field(default=1, ge=1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def amount(self) -> Decimal:
        return self.unit_price * self.quantity


class ClaimNote(BaseModel, frozen=True):
    """A timestamped, attributed comment on a claim."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    author: str
    text: str
    system: bool = False

    def render(self) -> str:
        stamp = self.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        return f"[{stamp} {self.author}] {self.text}"


class Expense(BaseModel, frozen=True):
    """
    A reimbursement claim filed against one project.

    The model is immutable; the claim store replaces it wholesale on every
    mutation. ``total_amount`` is derived from ``items`` and cannot be set.
    """

    id: str
    project_id: str
    category: str
    invoice_date: date = Field(default_factory=date.today)
    invoice_number: Optional[str] = None
    payment_method: PaymentMethod
    payer_name: Optional[str] = None
    vendor_tax_id: Optional[str] = None
    items: tuple[InvoiceItem, ...] = Field(..., min_length=1)
    status: ExpenseStatus = ExpenseStatus.SUBMITTED
    notes: tuple[ClaimNote, ...] = ()
    requires_purchase_request: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_amount(self) -> Decimal:
        return money_sum(item.amount for item in self.items)


# ─── Inputs ───────────────────────────────────────────────────────────────────


class LineItemInput(BaseModel):
    """Caller-supplied invoice line."""

    name: str = ""
    unit_price: Money = Field(..., ge=0)
    quantity: int = Field(default=1, ge=1)


class ClaimDraft(BaseModel):
    """Input model for submitting a new claim."""

    project_id: str
    category: str
    items: list[LineItemInput] = Field(default_factory=list)
    payment_method: PaymentMethod = PaymentMethod.ADVANCE
    payer_name: Optional[str] = None
    vendor_tax_id: Optional[str] = None
    invoice_date: Optional[date] = None
    invoice_number: Optional[str] = None


class ClaimEdit(BaseModel):
    """
    Input model for a privileged claim edit.

    Every field is optional; ``None`` keeps the claim's current value. An
    empty or blank ``invoice_number`` clears the stored invoice number.
    """

    project_id: Optional[str] = None
    category: Optional[str] = None
    items: Optional[list[LineItemInput]] = None
    payment_method: Optional[PaymentMethod] = None
    payer_name: Optional[str] = None
    vendor_tax_id: Optional[str] = None
    invoice_date: Optional[date] = None
    invoice_number: Optional[str] = None


# ─── Derived figures ──────────────────────────────────────────────────────────


class CategoryFigures(BaseModel, frozen=True):
    """Per-category spend for one project. Informational only."""

    category: str
    cap: Optional[Decimal]
    spent: Decimal
    pending: Decimal
    committed: Decimal
    over_cap: bool


class ProjectFigures(BaseModel, frozen=True):
    """
    Reconciled budget figures for one project.

    ``spent + pending + remaining == budget`` always holds; ``remaining``
    may be negative when the project is over budget.
    """

    project_id: str
    budget: Decimal
    expense_spent: Decimal
    expense_pending: Decimal
    manual_spent: Decimal
    spent: Decimal
    pending: Decimal
    remaining: Decimal
    over_budget: bool
    utilization_percent: float
    categories: tuple[CategoryFigures, ...] = ()


class PortfolioSummary(BaseModel, frozen=True):
    """Totals across every registered project."""

    total_budget: Decimal
    total_spent: Decimal
    total_pending: Decimal
    total_remaining: Decimal
    utilization_percent: float
    project_count: int
    projects: tuple[ProjectFigures, ...] = ()
