# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Tests for ProjectRegistry and manual budget adjustments."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from expense_ledger.config import ALL_CATEGORY_IDS, default_projects
from expense_ledger.errors import (
    DuplicateProjectError,
    InvalidAdjustmentError,
    ProjectNotFoundError,
)
from expense_ledger.projects import ProjectRegistry, build_adjustment
from expense_ledger.types import Project, ProjectType


class TestBuildAdjustment:
    def test_reason_is_stripped_and_timestamp_kept(self) -> None:
        at = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
        adjustment = build_adjustment(120.0, reason="  Courier fee ", user="admin", at=at)
        assert adjustment.reason == "Courier fee"
        assert adjustment.date == at
        assert adjustment.amount == 120.0

    def test_ids_are_unique(self) -> None:
        first = build_adjustment(1.0, reason="a", user="admin")
        second = build_adjustment(1.0, reason="a", user="admin")
        assert first.id != second.id

    @pytest.mark.parametrize(
        ("amount", "reason"),
        [(0.0, "fee"), (10.0, ""), (10.0, "   "), (float("inf"), "fee"), (float("nan"), "fee")],
    )
    def test_invalid_input_is_rejected(self, amount: float, reason: str) -> None:
        with pytest.raises(InvalidAdjustmentError) as excinfo:
            build_adjustment(amount, reason=reason, user="admin", project_id="p1")
        assert excinfo.value.project_id == "p1"
        assert excinfo.value.code == "INVALID_ADJUSTMENT"


class TestProjectRegistry:
    def test_register_and_require(self, small_project: Project) -> None:
        registry = ProjectRegistry([small_project])
        assert registry.require("P") is small_project
        assert "P" in registry
        assert len(registry) == 1

    def test_unknown_project(self) -> None:
        registry = ProjectRegistry()
        assert registry.get("missing") is None
        with pytest.raises(ProjectNotFoundError):
            registry.require("missing")

    def test_duplicate_id_is_rejected(self, small_project: Project) -> None:
        registry = ProjectRegistry([small_project])
        with pytest.raises(DuplicateProjectError) as excinfo:
            registry.register(small_project.model_copy(update={"code": "OTHER"}))
        assert excinfo.value.field == "id"

    def test_duplicate_code_is_rejected(self, small_project: Project) -> None:
        registry = ProjectRegistry([small_project])
        with pytest.raises(DuplicateProjectError) as excinfo:
            registry.register(small_project.model_copy(update={"id": "Q"}))
        assert excinfo.value.field == "code"
        assert len(registry) == 1

    def test_add_adjustment_replaces_project(self, small_project: Project) -> None:
        registry = ProjectRegistry([small_project])
        adjustment = registry.add_adjustment("P", 50.0, reason="fee", user="admin")
        updated = registry.require("P")
        assert updated.adjustments == (adjustment,)
        assert small_project.adjustments == ()

    def test_failed_adjustment_leaves_project_unchanged(self, small_project: Project) -> None:
        registry = ProjectRegistry([small_project])
        with pytest.raises(InvalidAdjustmentError):
            registry.add_adjustment("P", 0.0, reason="fee", user="admin")
        assert registry.require("P") is small_project


class TestProjectModel:
    def test_zero_or_missing_cap_means_unlimited(self, small_project: Project) -> None:
        assert small_project.cap_for("travel") == 2_000.0
        assert small_project.cap_for("office") is None
        assert small_project.cap_for("meal") is None

    def test_negative_budget_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Project(
                id="x",
                code="X",
                name="X",
                type=ProjectType.GRANT,
                budget=-1.0,
                allowed_categories=frozenset({"office"}),
            )

    @pytest.mark.parametrize("budget", [float("inf"), float("nan"), "Infinity"])
    def test_non_finite_budget_is_rejected(self, budget: object) -> None:
        with pytest.raises(ValidationError):
            Project(
                id="x",
                code="X",
                name="X",
                type=ProjectType.GRANT,
                budget=budget,
                allowed_categories=frozenset({"office"}),
            )

    def test_float_budget_is_held_exactly(self) -> None:
        project = Project(
            id="x",
            code="X",
            name="X",
            type=ProjectType.GRANT,
            budget=10_000.1,
            allowed_categories=frozenset({"office"}),
        )
        assert project.budget == Decimal("10000.1")

    def test_negative_cap_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Project(
                id="x",
                code="X",
                name="X",
                type=ProjectType.GRANT,
                budget=10.0,
                allowed_categories=frozenset({"office"}),
                category_budgets={"office": -5.0},
            )

    def test_default_projects(self) -> None:
        projects = {project.id: project for project in default_projects()}
        assert projects["undecided"].budget == 0.0
        assert projects["undecided"].allowed_categories == ALL_CATEGORY_IDS
        assert projects["p1"].type is ProjectType.GRANT
        assert not projects["p1"].allows("meal")
        assert projects["p3"].allows("maintenance")
        assert len({project.code for project in projects.values()}) == 4
