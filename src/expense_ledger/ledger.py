# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging
import threading
from decimal import Decimal
from typing import Any

from expense_ledger.advisory import (
    AdvisoryClient,
    AdvisoryRequest,
    ExpenseAdvisor,
    static_advisories,
)
from expense_ledger.config import LedgerConfig, default_projects
from expense_ledger.errors import NotPrivilegedError
from expense_ledger.lifecycle import allowed_targets
from expense_ledger.policy import build_items, items_total
from expense_ledger.projects import ProjectRegistry
from expense_ledger.query import ClaimFilter, filter_claims
from expense_ledger.reconciler import reconcile_all, summarize
from expense_ledger.storage.interface import ClaimStorage
from expense_ledger.storage.memory import MemoryStorage
from expense_ledger.store import ClaimStore
from expense_ledger.types import (
    BudgetAdjustment,
    ClaimDraft,
    ClaimEdit,
    Expense,
    ExpenseStatus,
    PortfolioSummary,
    Project,
    ProjectFigures,
)

logger = logging.getLogger("expense_ledger")


class ExpenseLedger:
    """
    Expense claims plus the budget figures derived from them.

    Design contract
    ---------------
    - Every mutating call (submit, transition, edit, annotate, adjust,
      register) runs to completion as: validate, mutate, reconcile every
      project from scratch, persist the claim snapshot, return.
    - Budget figures are replaced wholesale after each pass and are never
      patched incrementally.
    - Mutations and their reconciliation run under one lock, so concurrent
      callers never observe a torn ``spent``/``pending``/``remaining``.
    - A failed mutation raises a typed ExpenseLedgerError and leaves claims,
      projects and figures unchanged.
    - The advisory oracle never touches state.

    Usage
    -----
    ::

        ledger = ExpenseLedger()
        claim = ledger.submit_claim(ClaimDraft(
            project_id="p1",
            category="office",
            items=[LineItemInput(name="Toner", unit_price=3_000.0)],
            payer_name="Wang (assistant)",
        ))
        ledger.transition(claim.id, ExpenseStatus.COMPANY_APPROVED)
        ledger.figures("p1").pending  # Decimal("3000.0")
    """

    def __init__(
        self,
        config: LedgerConfig | None = None,
        storage: ClaimStorage | None = None,
        projects: list[Project] | None = None,
        advisory_client: AdvisoryClient | None = None,
    ) -> None:
        self._config = config or LedgerConfig()
        self._storage: ClaimStorage = storage if storage is not None else MemoryStorage()
        self._registry = ProjectRegistry(projects if projects is not None else default_projects())
        self._store = ClaimStore()
        self._advisor = ExpenseAdvisor(
            client=advisory_client,
            config=self._config.advisory,
            threshold=self._config.purchase_request_threshold,
        )
        self._lock = threading.RLock()
        self._figures: dict[str, ProjectFigures] = {}

        self._store.load(self._storage.load_claims())
        self._reconcile()

    @property
    def config(self) -> LedgerConfig:
        return self._config

    # ─── Projects ─────────────────────────────────────────────────────────────

    def register_project(self, project: Project) -> ProjectFigures:
        """
        Add a project and return its reconciled figures.

        Raises:
            DuplicateProjectError: If the id or code is already registered.
        """
        with self._lock:
            self._registry.register(project)
            self._reconcile()
            logger.info(
                "project_registered",
                extra={"project_id": project.id, "budget": project.budget},
            )
            return self._figures[project.id]

    def project(self, project_id: str) -> Project:
        """
        Raises:
            ProjectNotFoundError: If ``project_id`` is not registered.
        """
        return self._registry.require(project_id)

    def projects(self) -> list[Project]:
        return self._registry.list()

    def add_adjustment(
        self,
        project_id: str,
        amount: Decimal | float,
        reason: str,
        user: str,
    ) -> BudgetAdjustment:
        """
        Append a manual ledger entry to a project's spent total.

        Positive amounts increase spent (and decrease remaining); negative
        amounts are refunds.

        Raises:
            ProjectNotFoundError: If ``project_id`` is not registered.
            InvalidAdjustmentError: If ``amount`` is zero or ``reason`` blank.
        """
        with self._lock:
            adjustment = self._registry.add_adjustment(
                project_id, amount=amount, reason=reason, user=user
            )
            self._reconcile()
            logger.info(
                "adjustment_added",
                extra={
                    "project_id": project_id,
                    "adjustment_id": adjustment.id,
                    "amount": adjustment.amount,
                    "user": user,
                },
            )
            return adjustment

    # ─── Claims ───────────────────────────────────────────────────────────────

    def submit_claim(self, draft: ClaimDraft) -> Expense:
        """
        Validate and store a new claim in the ``submitted`` state.

        Raises:
            ProjectNotFoundError: Unknown project id.
            CategoryNotAllowedError: Category outside the project's allow-list.
            ZeroAmountError: Computed total is not positive.
            PaymentDetailMissingError: Payer name / vendor tax id missing.
        """
        with self._lock:
            project = self._registry.require(draft.project_id)
            claim = self._store.create(
                draft,
                project=project,
                threshold=self._config.purchase_request_threshold,
                system_author=self._config.system_author,
            )
            self._after_claim_mutation()
            logger.info(
                "claim_submitted",
                extra={
                    "claim_id": claim.id,
                    "project_id": claim.project_id,
                    "total_amount": claim.total_amount,
                    "requires_purchase_request": claim.requires_purchase_request,
                },
            )
            return claim

    def transition(
        self,
        claim_id: str,
        target: ExpenseStatus,
        actor: str | None = None,
    ) -> Expense:
        """
        Move a claim one step along the status table.

        Raises:
            ClaimNotFoundError: Unknown claim id.
            InvalidTransitionError: ``target`` is not reachable from the
                claim's current status.
        """
        with self._lock:
            previous = self._store.require(claim_id).status
            claim = self._store.transition(
                claim_id, target, author=actor or self._config.privileged_author
            )
            self._after_claim_mutation()
            logger.info(
                "claim_transitioned",
                extra={
                    "claim_id": claim_id,
                    "from_status": previous.value,
                    "to_status": target.value,
                },
            )
            return claim

    def approve(self, claim_id: str) -> Expense:
        return self.transition(claim_id, ExpenseStatus.COMPANY_APPROVED)

    def reject(self, claim_id: str) -> Expense:
        return self.transition(claim_id, ExpenseStatus.REJECTED)

    def reopen(self, claim_id: str) -> Expense:
        """Reset a rejected claim to ``submitted``."""
        return self.transition(claim_id, ExpenseStatus.SUBMITTED)

    def edit_claim(self, claim_id: str, changes: ClaimEdit, privileged: bool) -> Expense:
        """
        Apply a privileged edit to a claim that has not been consumed yet.

        ``requires_purchase_request`` keeps its creation-time value even if
        the edited total crosses the threshold.

        Raises:
            NotPrivilegedError: ``privileged`` is False.
            ClaimNotFoundError: Unknown claim id.
            ProjectNotFoundError: ``changes.project_id`` is not registered.
            ClaimNotEditableError: The claim is school approved or paid.
            CategoryNotAllowedError, ZeroAmountError, PaymentDetailMissingError:
                The edited claim breaks a creation rule.
        """
        if not privileged:
            raise NotPrivilegedError("edit_claim")
        with self._lock:
            current = self._store.require(claim_id)
            project = self._registry.require(changes.project_id or current.project_id)
            claim = self._store.edit(claim_id, changes, project=project, privileged=privileged)
            self._after_claim_mutation()
            logger.info(
                "claim_edited",
                extra={
                    "claim_id": claim_id,
                    "project_id": claim.project_id,
                    "total_amount": claim.total_amount,
                },
            )
            return claim

    def annotate(
        self,
        claim_id: str,
        text: str,
        privileged: bool = False,
        actor: str | None = None,
    ) -> Expense:
        """
        Append a timestamped note to a claim. Blank text is a no-op.

        Raises:
            ClaimNotFoundError: Unknown claim id.
        """
        if actor is None:
            actor = self._config.privileged_author if privileged else self._config.system_author
        with self._lock:
            before = self._store.require(claim_id)
            claim = self._store.annotate(claim_id, text, author=actor)
            if claim is not before:
                self._after_claim_mutation()
                logger.info("claim_annotated", extra={"claim_id": claim_id, "author": actor})
            return claim

    def get_claim(self, claim_id: str) -> Expense:
        """
        Raises:
            ClaimNotFoundError: Unknown claim id.
        """
        return self._store.require(claim_id)

    def claims(self, claim_filter: ClaimFilter | None = None) -> list[Expense]:
        """Return claims in submission order, optionally filtered."""
        return filter_claims(
            self._store.list(),
            claim_filter,
            projects={project.id: project for project in self._registry.list()},
            category_names=self._config.category_names(),
        )

    def next_statuses(self, claim_id: str) -> list[ExpenseStatus]:
        """Return the statuses a reviewer may move this claim to, in table order."""
        current = self._store.require(claim_id).status
        targets = allowed_targets(current)
        return [status for status in ExpenseStatus if status in targets]

    def snapshot(self) -> list[dict[str, Any]]:
        """Return the serialisable claim collection handed to storage."""
        with self._lock:
            return self._store.snapshot()

    # ─── Figures ──────────────────────────────────────────────────────────────

    def figures(self, project_id: str) -> ProjectFigures:
        """
        Return the figures from the most recent reconciliation pass.

        Raises:
            ProjectNotFoundError: If ``project_id`` is not registered.
        """
        with self._lock:
            self._registry.require(project_id)
            return self._figures[project_id]

    def all_figures(self) -> dict[str, ProjectFigures]:
        with self._lock:
            return dict(self._figures)

    def summary(self) -> PortfolioSummary:
        """Portfolio totals across every registered project."""
        with self._lock:
            return summarize(self._figures[project.id] for project in self._registry.list())

    def reconcile(self) -> dict[str, ProjectFigures]:
        """Re-run reconciliation explicitly. The result equals the cached pass."""
        with self._lock:
            self._reconcile()
            return dict(self._figures)

    # ─── Advisory ─────────────────────────────────────────────────────────────

    def static_advice(self, project_id: str, category: str) -> list[str]:
        return static_advisories(self._registry.require(project_id), category)

    async def advise(self, subject: str | ClaimDraft) -> str:
        """
        Ask the advisory oracle about a stored claim (by id) or a draft.

        The answer is informational only. Oracle failures return the
        configured fallback text and never raise.

        Raises:
            ClaimNotFoundError, ProjectNotFoundError: ``subject`` does not
                resolve. These are raised before the oracle is contacted.
        """
        if isinstance(subject, ClaimDraft):
            project = self._registry.require(subject.project_id)
            items = build_items(subject.items)
            category = subject.category
        else:
            claim = self._store.require(subject)
            project = self._registry.require(claim.project_id)
            items = claim.items
            category = claim.category

        request = AdvisoryRequest(
            items=items,
            total_amount=items_total(items),
            project=project,
            category_name=self._config.category_name(category),
        )
        return await self._advisor.analyze(request)

    # ─── Private helpers ──────────────────────────────────────────────────────

    def _after_claim_mutation(self) -> None:
        self._reconcile()
        self._storage.save_claims(self._store.snapshot())

    def _reconcile(self) -> None:
        """
        Recompute every project's figures from the current snapshot.

        Over-budget and over-cap warnings are logged only when a project or
        category crosses its limit, not again on later passes while it stays
        over.
        """
        previous = self._figures
        figures = reconcile_all(self._registry.list(), self._store.list())
        for item in figures.values():
            before = previous.get(item.project_id)
            if item.over_budget and not (before is not None and before.over_budget):
                logger.warning(
                    "project_over_budget",
                    extra={"project_id": item.project_id, "remaining": item.remaining},
                )
            capped_before = (
                {category.category for category in before.categories if category.over_cap}
                if before is not None
                else set()
            )
            for category in item.categories:
                if category.over_cap and category.category not in capped_before:
                    logger.warning(
                        "category_over_cap",
                        extra={
                            "project_id": item.project_id,
                            "category": category.category,
                            "cap": category.cap,
                            "committed": category.committed,
                        },
                    )
        self._figures = figures
