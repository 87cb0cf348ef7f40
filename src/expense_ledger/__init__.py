# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
expense-ledger: expense claim lifecycle and project budget reconciliation.

Quick start::

    from expense_ledger import ClaimDraft, ExpenseLedger, ExpenseStatus, LineItemInput

    ledger = ExpenseLedger()
    claim = ledger.submit_claim(ClaimDraft(
        project_id="p1",
        category="office",
        items=[LineItemInput(name="Toner", unit_price=3_000.0)],
        payer_name="Wang (assistant)",
    ))
    ledger.transition(claim.id, ExpenseStatus.COMPANY_APPROVED)

    figures = ledger.figures("p1")
    assert figures.spent + figures.pending + figures.remaining == figures.budget
"""

from expense_ledger.advisory import (
    AdvisoryClient,
    AdvisoryRequest,
    ExpenseAdvisor,
    build_prompt,
    static_advisories,
)
from expense_ledger.config import (
    DEFAULT_CATEGORIES,
    DEFAULT_EMPLOYEES,
    AdvisoryConfig,
    LedgerConfig,
    default_projects,
)
from expense_ledger.errors import (
    CategoryNotAllowedError,
    ClaimNotEditableError,
    ClaimNotFoundError,
    DuplicateProjectError,
    ExpenseLedgerError,
    InvalidAdjustmentError,
    InvalidTransitionError,
    NotPrivilegedError,
    PaymentDetailMissingError,
    ProjectNotFoundError,
    StorageError,
    ZeroAmountError,
)
from expense_ledger.export_formats import export_csv, export_json
from expense_ledger.ledger import ExpenseLedger
from expense_ledger.lifecycle import (
    TRANSITIONS,
    allowed_targets,
    bucket_for,
    can_transition,
    is_editable,
    is_terminal,
    require_transition,
)
from expense_ledger.projects import ProjectRegistry, build_adjustment
from expense_ledger.query import ClaimFilter, filter_claims
from expense_ledger.reconciler import (
    reconcile_all,
    reconcile_categories,
    reconcile_project,
    summarize,
)
from expense_ledger.storage import ClaimStorage, JsonFileStorage, MemoryStorage
from expense_ledger.store import ClaimStore
from expense_ledger.types import (
    BudgetAdjustment,
    BudgetBucket,
    Category,
    CategoryFigures,
    ClaimDraft,
    ClaimEdit,
    ClaimNote,
    Expense,
    ExpenseStatus,
    InvoiceItem,
    LineItemInput,
    PaymentMethod,
    PortfolioSummary,
    Project,
    ProjectFigures,
    ProjectType,
)

__version__ = "0.1.0"

__all__ = [
    # Core class
    "ExpenseLedger",
    # Types
    "ExpenseStatus",
    "ProjectType",
    "PaymentMethod",
    "BudgetBucket",
    "Category",
    "Project",
    "BudgetAdjustment",
    "InvoiceItem",
    "ClaimNote",
    "Expense",
    "LineItemInput",
    "ClaimDraft",
    "ClaimEdit",
    "CategoryFigures",
    "ProjectFigures",
    "PortfolioSummary",
    # Configuration
    "LedgerConfig",
    "AdvisoryConfig",
    "DEFAULT_CATEGORIES",
    "DEFAULT_EMPLOYEES",
    "default_projects",
    # Errors
    "ExpenseLedgerError",
    "ProjectNotFoundError",
    "DuplicateProjectError",
    "CategoryNotAllowedError",
    "ZeroAmountError",
    "PaymentDetailMissingError",
    "InvalidTransitionError",
    "InvalidAdjustmentError",
    "ClaimNotFoundError",
    "ClaimNotEditableError",
    "NotPrivilegedError",
    "StorageError",
    # Lifecycle
    "TRANSITIONS",
    "allowed_targets",
    "can_transition",
    "require_transition",
    "bucket_for",
    "is_terminal",
    "is_editable",
    # Components
    "ClaimStore",
    "ProjectRegistry",
    "build_adjustment",
    # Reconciliation
    "reconcile_project",
    "reconcile_categories",
    "reconcile_all",
    "summarize",
    # Queries and export
    "ClaimFilter",
    "filter_claims",
    "export_json",
    "export_csv",
    # Storage
    "ClaimStorage",
    "MemoryStorage",
    "JsonFileStorage",
    # Advisory
    "AdvisoryClient",
    "AdvisoryRequest",
    "ExpenseAdvisor",
    "build_prompt",
    "static_advisories",
]
