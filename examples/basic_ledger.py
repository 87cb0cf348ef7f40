# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
basic_ledger.py

Walks one claim through the full review path and prints the project's budget
figures after every step:
  1. Submit a claim against a seeded project.
  2. Approve it internally, log it with the school, get it approved and paid.
  3. Book a manual adjustment and a refund.
  4. Print the portfolio summary and a CSV export.

Run with:  python examples/basic_ledger.py
(with expense-ledger installed)
"""

from expense_ledger import (
    ClaimDraft,
    ExpenseLedger,
    ExpenseStatus,
    LineItemInput,
    export_csv,
)

# ─── Setup ────────────────────────────────────────────────────────────────────

ledger = ExpenseLedger()


def show(step: str) -> None:
    figures = ledger.figures("p3")
    print(
        f"{step:<28} spent=${figures.spent:>10,.2f}  "
        f"pending=${figures.pending:>10,.2f}  remaining=${figures.remaining:>12,.2f}"
    )


show("start")

# ─── Submit ───────────────────────────────────────────────────────────────────

claim = ledger.submit_claim(
    ClaimDraft(
        project_id="p3",
        category="office",
        invoice_number="AB-12345678",
        items=[
            LineItemInput(name="Printer toner", unit_price=2_400.0, quantity=1),
            LineItemInput(name="A4 paper", unit_price=150.0, quantity=4),
        ],
        payer_name="Chang (administration)",
    )
)
show("submitted")

# ─── Review path ──────────────────────────────────────────────────────────────

for status in (
    ExpenseStatus.COMPANY_APPROVED,
    ExpenseStatus.SCHOOL_LOGGED,
    ExpenseStatus.SCHOOL_APPROVED,
    ExpenseStatus.SCHOOL_PAID,
):
    ledger.transition(claim.id, status)
    show(status.label())

# ─── Manual adjustments ───────────────────────────────────────────────────────

ledger.add_adjustment("p3", 5_000.0, reason="Bank transfer fee", user="admin")
show("adjustment +5000")
ledger.add_adjustment("p3", -2_000.0, reason="Vendor refund", user="admin")
show("adjustment -2000")

# ─── Summary ──────────────────────────────────────────────────────────────────

summary = ledger.summary()
print(
    f"\nPortfolio: budget=${summary.total_budget:,.2f}  "
    f"used={summary.utilization_percent:.2f}%  "
    f"remaining=${summary.total_remaining:,.2f}"
)

for note in ledger.get_claim(claim.id).notes:
    print(note.render())

print()
print(
    export_csv(
        ledger.claims(),
        projects={project.id: project for project in ledger.projects()},
        category_names=ledger.config.category_names(),
    )
)
