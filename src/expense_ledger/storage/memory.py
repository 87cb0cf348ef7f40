# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

import copy
from typing import Any

from expense_ledger.storage.interface import ClaimStorage


class MemoryStorage(ClaimStorage):
    """
    In-process memory store for tests and single-run scripts.

    All state is lost when the process exits. Use JsonFileStorage to keep the
    claim list across restarts.
    """

    def __init__(self, records: list[dict[str, Any]] | None = None) -> None:
        self._records: list[dict[str, Any]] = copy.deepcopy(records or [])
        self.save_count = 0

    def load_claims(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._records)

    def save_claims(self, records: list[dict[str, Any]]) -> None:
        self._records = copy.deepcopy(records)
        self.save_count += 1
