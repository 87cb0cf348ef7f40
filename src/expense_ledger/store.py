# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import uuid4

from expense_ledger.errors import (
    ClaimNotEditableError,
    ClaimNotFoundError,
    NotPrivilegedError,
)
from expense_ledger.lifecycle import is_editable, require_transition
from expense_ledger.policy import (
    PURCHASE_REQUEST_NOTE,
    requires_purchase_request,
    validate_claim_fields,
)
from expense_ledger.types import (
    ClaimDraft,
    ClaimEdit,
    ClaimNote,
    Expense,
    ExpenseStatus,
    Project,
)


class ClaimStore:
    """
    Ordered collection of expense claims.

    Design contract
    ---------------
    - Claims are immutable models. Every mutation builds a new claim and
      replaces the stored one; nothing is patched in place.
    - A failed operation leaves the collection exactly as it was.
    - ``total_amount`` and each item's ``amount`` are computed from the
      items, so they can never drift from them.
    - ``requires_purchase_request`` is decided once at creation and never
      recomputed.

    The store resolves nothing itself: callers pass the Project a claim is
    validated against.
    """

    def __init__(self, claims: Iterable[Expense] | None = None) -> None:
        self._claims: dict[str, Expense] = {}
        for claim in claims or []:
            self._claims[claim.id] = claim

    # ─── Create ───────────────────────────────────────────────────────────────

    def create(
        self,
        draft: ClaimDraft,
        project: Project,
        threshold: Decimal,
        system_author: str = "System",
    ) -> Expense:
        """
        Validate a draft against ``project`` and add it as a submitted claim.

        Raises:
            CategoryNotAllowedError: Category outside the project's allow-list.
            ZeroAmountError: Computed total is not positive.
            PaymentDetailMissingError: Payer name / vendor tax id missing.
        """
        fields = validate_claim_fields(
            project=project,
            category=draft.category,
            items=draft.items,
            payment_method=draft.payment_method,
            payer_name=draft.payer_name,
            vendor_tax_id=draft.vendor_tax_id,
        )
        flagged = requires_purchase_request(fields.total, threshold)
        notes: tuple[ClaimNote, ...] = ()
        if flagged:
            notes = (ClaimNote(author=system_author, text=PURCHASE_REQUEST_NOTE, system=True),)

        claim = Expense(
            id=str(uuid4()),
            project_id=project.id,
            category=draft.category,
            invoice_date=draft.invoice_date or date.today(),
            invoice_number=draft.invoice_number,
            payment_method=draft.payment_method,
            payer_name=fields.payer_name,
            vendor_tax_id=fields.vendor_tax_id,
            items=fields.items,
            status=ExpenseStatus.SUBMITTED,
            notes=notes,
            requires_purchase_request=flagged,
            created_at=datetime.now(tz=timezone.utc),
        )
        self._claims[claim.id] = claim
        return claim

    # ─── Transition ───────────────────────────────────────────────────────────

    def transition(
        self,
        claim_id: str,
        target: ExpenseStatus,
        author: str = "System",
    ) -> Expense:
        """
        Move a claim to ``target`` and record the change as a system note.

        Raises:
            ClaimNotFoundError: Unknown claim id.
            InvalidTransitionError: ``target`` is not reachable in one step.
                The claim is left unchanged.
        """
        claim = self.require(claim_id)
        require_transition(claim_id, claim.status, target)

        note = ClaimNote(
            author=author,
            text=f"Status changed: {claim.status.label()} -> {target.label()}",
            system=True,
        )
        updated = claim.model_copy(update={"status": target, "notes": claim.notes + (note,)})
        self._claims[claim_id] = updated
        return updated

    # ─── Edit ─────────────────────────────────────────────────────────────────

    def edit(
        self,
        claim_id: str,
        changes: ClaimEdit,
        project: Project,
        privileged: bool,
    ) -> Expense:
        """
        Apply a privileged edit and re-validate the result.

        ``project`` is the project the claim will belong to after the edit.
        Status and ``requires_purchase_request`` are never changed here. A
        blank ``invoice_number`` clears the stored one.

        Raises:
            NotPrivilegedError: ``privileged`` is False.
            ClaimNotFoundError: Unknown claim id.
            ClaimNotEditableError: The claim is already school approved or paid.
            CategoryNotAllowedError, ZeroAmountError, PaymentDetailMissingError:
                The edited claim breaks a creation rule.
        """
        if not privileged:
            raise NotPrivilegedError("edit_claim")
        claim = self.require(claim_id)
        if not is_editable(claim.status):
            raise ClaimNotEditableError(claim_id=claim_id, status=claim.status)

        category = changes.category if changes.category is not None else claim.category
        payment_method = (
            changes.payment_method if changes.payment_method is not None else claim.payment_method
        )
        payer_name = changes.payer_name if changes.payer_name is not None else claim.payer_name
        vendor_tax_id = (
            changes.vendor_tax_id if changes.vendor_tax_id is not None else claim.vendor_tax_id
        )
        items = changes.items if changes.items is not None else claim.items

        fields = validate_claim_fields(
            project=project,
            category=category,
            items=items,
            payment_method=payment_method,
            payer_name=payer_name,
            vendor_tax_id=vendor_tax_id,
            claim_id=claim_id,
        )

        update: dict[str, Any] = {
            "project_id": project.id,
            "category": category,
            "payment_method": payment_method,
            "payer_name": fields.payer_name,
            "vendor_tax_id": fields.vendor_tax_id,
            "items": fields.items,
        }
        if changes.invoice_date is not None:
            update["invoice_date"] = changes.invoice_date
        if changes.invoice_number is not None:
            update["invoice_number"] = changes.invoice_number.strip() or None

        updated = claim.model_copy(update=update)
        self._claims[claim_id] = updated
        return updated

    # ─── Annotate ─────────────────────────────────────────────────────────────

    def annotate(self, claim_id: str, text: str, author: str) -> Expense:
        """
        Append a note to a claim.

        Never fails validation: blank text is accepted and leaves the claim
        unchanged.

        Raises:
            ClaimNotFoundError: Unknown claim id.
        """
        claim = self.require(claim_id)
        cleaned = (text or "").strip()
        if not cleaned:
            return claim

        note = ClaimNote(author=author, text=cleaned)
        updated = claim.model_copy(update={"notes": claim.notes + (note,)})
        self._claims[claim_id] = updated
        return updated

    # ─── Queries ──────────────────────────────────────────────────────────────

    def get(self, claim_id: str) -> Expense | None:
        return self._claims.get(claim_id)

    def require(self, claim_id: str) -> Expense:
        """
        Raises:
            ClaimNotFoundError: If ``claim_id`` is not in the store.
        """
        claim = self._claims.get(claim_id)
        if claim is None:
            raise ClaimNotFoundError(claim_id)
        return claim

    def list(self) -> list[Expense]:
        """Return all claims in submission order."""
        return list(self._claims.values())

    # ─── Persistence snapshot ─────────────────────────────────────────────────

    def snapshot(self) -> list[dict[str, Any]]:
        """Return the claim collection as JSON-serialisable records."""
        return [claim.model_dump(mode="json") for claim in self._claims.values()]

    def load(self, records: Iterable[dict[str, Any]]) -> None:
        """
        Replace the collection with previously persisted records.

        Every record is validated before any is stored; on a validation error
        the current collection is kept.
        """
        loaded = [Expense.model_validate(record) for record in records]
        self._claims = {claim.id: claim for claim in loaded}

    def __len__(self) -> int:
        return len(self._claims)
