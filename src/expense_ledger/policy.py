# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
Validation and business rules applied when a claim is created or edited.

- Category allow-list: a claim's category must be allowed by its project.
- Zero amount: a claim's total must be strictly positive.
- Payment details: Advance claims need a payer name, Direct claims need a
  vendor tax id. The inactive field is cleared.
- Threshold rule: totals strictly above the configured threshold require a
  separate purchase request.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from expense_ledger.errors import (
    CategoryNotAllowedError,
    PaymentDetailMissingError,
    ZeroAmountError,
)
from expense_ledger.types import (
    InvoiceItem,
    LineItemInput,
    PaymentMethod,
    Project,
    money_sum,
)

PURCHASE_REQUEST_NOTE = (
    "Total exceeds the purchase request threshold; attach a purchase request form."
)


@dataclass(frozen=True)
class ValidatedClaimFields:
    """Claim fields that passed every creation/edit rule."""

    items: tuple[InvoiceItem, ...]
    total: Decimal
    payer_name: str | None
    vendor_tax_id: str | None


def build_items(inputs: Iterable[LineItemInput | InvoiceItem]) -> tuple[InvoiceItem, ...]:
    """Convert caller line items into immutable invoice items."""
    return tuple(
        line
        if isinstance(line, InvoiceItem)
        else InvoiceItem(name=line.name, unit_price=line.unit_price, quantity=line.quantity)
        for line in inputs
    )


def items_total(items: Iterable[InvoiceItem]) -> Decimal:
    return money_sum(item.amount for item in items)


def requires_purchase_request(total: Decimal, threshold: Decimal) -> bool:
    """Return True when ``total`` is strictly above ``threshold``."""
    return total > threshold


def check_category(project: Project, category: str) -> None:
    """
    Raises:
        CategoryNotAllowedError: If ``category`` is not in the project's
            allow-list.
    """
    if not project.allows(category):
        raise CategoryNotAllowedError(project_id=project.id, category=category)


def check_total(total: Decimal, claim_id: str | None = None) -> None:
    """
    Raises:
        ZeroAmountError: If ``total`` is not strictly positive.
    """
    if total <= 0:
        raise ZeroAmountError(total=total, claim_id=claim_id)


def resolve_payment_details(
    payment_method: PaymentMethod,
    payer_name: str | None,
    vendor_tax_id: str | None,
) -> tuple[str | None, str | None]:
    """
    Keep only the field the payment method uses.

    Returns:
        ``(payer_name, vendor_tax_id)`` with the inactive field set to None
        and the active one stripped.

    Raises:
        PaymentDetailMissingError: If the active field is empty.
    """
    if payment_method is PaymentMethod.ADVANCE:
        payer = (payer_name or "").strip()
        if not payer:
            raise PaymentDetailMissingError(payment_method, "payer_name")
        return payer, None

    vendor = (vendor_tax_id or "").strip()
    if not vendor:
        raise PaymentDetailMissingError(payment_method, "vendor_tax_id")
    return None, vendor


def validate_claim_fields(
    project: Project,
    category: str,
    items: Iterable[LineItemInput | InvoiceItem],
    payment_method: PaymentMethod,
    payer_name: str | None,
    vendor_tax_id: str | None,
    claim_id: str | None = None,
) -> ValidatedClaimFields:
    """
    Apply every claim rule in order: category, total, payment details.

    The caller resolves the project first; an unknown project id is reported
    as ProjectNotFoundError before this function is reached.

    Raises:
        CategoryNotAllowedError: Category outside the project's allow-list.
        ZeroAmountError: Computed total is 0 (including an empty item list).
        PaymentDetailMissingError: Active payment field is empty.
    """
    check_category(project, category)

    built = build_items(items)
    total = items_total(built)
    check_total(total, claim_id=claim_id)

    payer, vendor = resolve_payment_details(payment_method, payer_name, vendor_tax_id)
    return ValidatedClaimFields(
        items=built,
        total=total,
        payer_name=payer,
        vendor_tax_id=vendor,
    )
