# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from expense_ledger.types import ExpenseStatus, PaymentMethod


class ExpenseLedgerError(Exception):
    """Base class for all expense-ledger errors."""

    def __init__(self, message: str, code: str = "EXPENSE_LEDGER_ERROR") -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ProjectNotFoundError(ExpenseLedgerError):
    """Raised when a referenced project id does not resolve."""

    def __init__(self, project_id: str) -> None:
        super().__init__(
            f"Project '{project_id}' does not exist. "
            "Register it first with ProjectRegistry.register().",
            code="PROJECT_NOT_FOUND",
        )
        self.project_id = project_id


class DuplicateProjectError(ExpenseLedgerError):
    """
    Raised when a project is registered with an id or code already in use.

    Attributes:
        field: Either ``'id'`` or ``'code'``.
        value: The conflicting value.
    """

    def __init__(self, field: str, value: str) -> None:
        super().__init__(
            f"A project with {field} '{value}' is already registered.",
            code="DUPLICATE_PROJECT",
        )
        self.field = field
        self.value = value


class CategoryNotAllowedError(ExpenseLedgerError):
    """
    Raised when a claim's category is not in its project's allow-list.

    Attributes:
        project_id: The project the claim was filed against.
        category: The rejected category id.
    """

    def __init__(self, project_id: str, category: str) -> None:
        super().__init__(
            f"Category '{category}' is not allowed for project '{project_id}'.",
            code="CATEGORY_NOT_ALLOWED",
        )
        self.project_id = project_id
        self.category = category


class ZeroAmountError(ExpenseLedgerError):
    """Raised when a claim's computed total is not positive."""

    def __init__(self, total: Decimal, claim_id: str | None = None) -> None:
        subject = f"Claim '{claim_id}'" if claim_id else "Claim"
        super().__init__(
            f"{subject} total must be greater than 0; got {total:.2f}.",
            code="ZERO_AMOUNT",
        )
        self.total = total
        self.claim_id = claim_id


class PaymentDetailMissingError(ExpenseLedgerError):
    """
    Raised when the field required by the chosen payment method is empty.

    Attributes:
        payment_method: The selected payment method.
        field: The name of the missing field.
    """

    def __init__(self, payment_method: PaymentMethod, field: str) -> None:
        super().__init__(
            f"Payment method '{payment_method.value}' requires '{field}'.",
            code="PAYMENT_DETAIL_MISSING",
        )
        self.payment_method = payment_method
        self.field = field


class InvalidTransitionError(ExpenseLedgerError):
    """
    Raised when a requested status change is not in the transition table.

    Attributes:
        claim_id: The claim whose status was to change.
        current: The claim's status at the time of the request.
        requested: The status that was requested.
    """

    def __init__(
        self,
        claim_id: str,
        current: ExpenseStatus,
        requested: ExpenseStatus,
    ) -> None:
        super().__init__(
            f"Claim '{claim_id}' cannot move from '{current.value}' "
            f"to '{requested.value}'.",
            code="INVALID_TRANSITION",
        )
        self.claim_id = claim_id
        self.current = current
        self.requested = requested


class InvalidAdjustmentError(ExpenseLedgerError):
    """
    Raised when a manual adjustment has a zero amount or an empty reason.

    Attributes:
        project_id: The project the adjustment targeted, if known.
        amount: The rejected amount.
        reason: The rejected reason text.
    """

    def __init__(self, project_id: str | None, amount: Decimal | float, reason: str) -> None:
        if not (reason or "").strip():
            problem = "reason must not be empty"
        elif amount == 0:
            problem = "amount must be non-zero"
        else:
            problem = "amount must be a finite number"
        target = f" for project '{project_id}'" if project_id else ""
        super().__init__(
            f"Invalid budget adjustment{target}: {problem}.",
            code="INVALID_ADJUSTMENT",
        )
        self.project_id = project_id
        self.amount = amount
        self.reason = reason


class ClaimNotFoundError(ExpenseLedgerError):
    """Raised when a referenced claim id does not exist in the store."""

    def __init__(self, claim_id: str) -> None:
        super().__init__(f"Claim '{claim_id}' does not exist.", code="CLAIM_NOT_FOUND")
        self.claim_id = claim_id


class ClaimNotEditableError(ExpenseLedgerError):
    """Raised when an edit targets a claim whose amount is already consumed."""

    def __init__(self, claim_id: str, status: ExpenseStatus) -> None:
        super().__init__(
            f"Claim '{claim_id}' is '{status.value}' and can no longer be edited.",
            code="CLAIM_NOT_EDITABLE",
        )
        self.claim_id = claim_id
        self.status = status


class NotPrivilegedError(ExpenseLedgerError):
    """Raised when a privileged operation is attempted without privilege."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"Operation '{operation}' requires a privileged caller.",
            code="NOT_PRIVILEGED",
        )
        self.operation = operation


class StorageError(ExpenseLedgerError):
    """Raised when a persisted claim snapshot cannot be read or written."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Claim storage at '{path}' failed: {detail}", code="STORAGE_ERROR")
        self.path = path
        self.detail = detail
