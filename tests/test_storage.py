# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Tests for the claim storage backends."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from expense_ledger import ClaimDraft, ExpenseLedger, ExpenseStatus, Project
from expense_ledger.errors import StorageError
from expense_ledger.storage import JsonFileStorage, MemoryStorage


class TestMemoryStorage:
    def test_starts_empty(self) -> None:
        assert MemoryStorage().load_claims() == []

    def test_saved_records_are_copied(self) -> None:
        storage = MemoryStorage()
        records = [{"id": "a", "notes": []}]
        storage.save_claims(records)
        records[0]["notes"].append("mutated")
        assert storage.load_claims() == [{"id": "a", "notes": []}]
        assert storage.save_count == 1


class TestJsonFileStorage:
    def test_missing_file_loads_empty(self, tmp_path: Path) -> None:
        storage = JsonFileStorage(tmp_path / "claims.json")
        assert storage.load_claims() == []

    def test_save_then_load(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "claims.json"
        storage = JsonFileStorage(path)
        storage.save_claims([{"id": "a", "total_amount": 12.5}])
        assert json.loads(path.read_text(encoding="utf-8")) == [{"id": "a", "total_amount": 12.5}]
        assert storage.load_claims() == [{"id": "a", "total_amount": 12.5}]
        assert not path.with_name("claims.json.tmp").exists()

    def test_malformed_file_raises_storage_error(self, tmp_path: Path) -> None:
        path = tmp_path / "claims.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError) as excinfo:
            JsonFileStorage(path).load_claims()
        assert excinfo.value.path == str(path)

    def test_non_array_document_raises_storage_error(self, tmp_path: Path) -> None:
        path = tmp_path / "claims.json"
        path.write_text('{"claims": []}', encoding="utf-8")
        with pytest.raises(StorageError):
            JsonFileStorage(path).load_claims()

    def test_ledger_restart_from_file(
        self,
        tmp_path: Path,
        small_project: Project,
        make_draft: Callable[..., ClaimDraft],
    ) -> None:
        path = tmp_path / "claims.json"
        first = ExpenseLedger(storage=JsonFileStorage(path), projects=[small_project])
        claim = first.submit_claim(make_draft())
        first.approve(claim.id)
        first.annotate(claim.id, "Receipt checked", privileged=True)

        second = ExpenseLedger(storage=JsonFileStorage(path), projects=[small_project])
        restored = second.get_claim(claim.id)
        assert restored == first.get_claim(claim.id)
        assert restored.status is ExpenseStatus.COMPANY_APPROVED
        assert second.figures("P").pending == 3_000.0
