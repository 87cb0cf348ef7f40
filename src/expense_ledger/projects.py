# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from expense_ledger.errors import (
    DuplicateProjectError,
    InvalidAdjustmentError,
    ProjectNotFoundError,
)
from expense_ledger.types import BudgetAdjustment, Project, to_money


def build_adjustment(
    amount: Decimal | float,
    reason: str,
    user: str,
    at: datetime | None = None,
    project_id: str | None = None,
) -> BudgetAdjustment:
    """
    Build a validated, immutable BudgetAdjustment with a stable UUID.

    Raises:
        InvalidAdjustmentError: If ``amount`` is zero, infinite or not a
            number, or ``reason`` is blank.
    """
    cleaned_reason = (reason or "").strip()
    try:
        money = to_money(amount)
    except ValueError:
        money = None
    if not isinstance(money, Decimal) or money == 0 or not cleaned_reason:
        raise InvalidAdjustmentError(project_id=project_id, amount=amount, reason=reason)

    return BudgetAdjustment(
        id=str(uuid4()),
        date=at if at is not None else datetime.now(tz=timezone.utc),
        amount=money,
        reason=cleaned_reason,
        user=user,
    )


class ProjectRegistry:
    """
    Owns the project records.

    Projects are immutable models. Appending an adjustment replaces the stored
    project with a copy whose ``adjustments`` tuple has the new entry at the
    end; earlier entries are never touched.

    Example::

        registry = ProjectRegistry()
        registry.register(Project(id="p1", code="A-1", name="Grant", type="grant",
                                  budget=100_000.0, allowed_categories={"office"}))
        registry.add_adjustment("p1", 5_000.0, reason="Bank fee", user="admin")
    """

    def __init__(self, projects: list[Project] | None = None) -> None:
        self._projects: dict[str, Project] = {}
        for project in projects or []:
            self.register(project)

    def register(self, project: Project) -> Project:
        """
        Add a project to the registry.

        Raises:
            DuplicateProjectError: If the id or accounting code is taken.
        """
        if project.id in self._projects:
            raise DuplicateProjectError("id", project.id)
        for existing in self._projects.values():
            if existing.code == project.code:
                raise DuplicateProjectError("code", project.code)
        self._projects[project.id] = project
        return project

    def get(self, project_id: str) -> Project | None:
        return self._projects.get(project_id)

    def require(self, project_id: str) -> Project:
        """
        Raises:
            ProjectNotFoundError: If ``project_id`` is not registered.
        """
        project = self._projects.get(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    def list(self) -> list[Project]:
        """Return all projects in registration order."""
        return list(self._projects.values())

    def add_adjustment(
        self,
        project_id: str,
        amount: Decimal | float,
        reason: str,
        user: str,
        at: datetime | None = None,
    ) -> BudgetAdjustment:
        """
        Append a manual ledger entry to a project.

        Raises:
            ProjectNotFoundError: If ``project_id`` is not registered.
            InvalidAdjustmentError: If ``amount`` is zero or ``reason`` is
                blank. The project is left unchanged.
        """
        project = self.require(project_id)
        adjustment = build_adjustment(
            amount=amount, reason=reason, user=user, at=at, project_id=project_id
        )
        self._projects[project_id] = project.model_copy(
            update={"adjustments": project.adjustments + (adjustment,)}
        )
        return adjustment

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._projects

    def __len__(self) -> int:
        return len(self._projects)
