# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ClaimStorage(ABC):
    """
    Persistence contract for the claim collection.

    The ledger hands over the whole collection after every mutation and reads
    it back once at startup. Records are JSON-serialisable dicts in the shape
    produced by ``Expense.model_dump(mode="json")``. Projects are seeded
    independently and are not persisted here.
    """

    @abstractmethod
    def load_claims(self) -> list[dict[str, Any]]:
        ...

    @abstractmethod
    def save_claims(self, records: list[dict[str, Any]]) -> None:
        ...
