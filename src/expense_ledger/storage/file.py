# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
JSON file storage backend.

The whole claim collection is written as one JSON array on every save. The
array is written to a sibling temporary file first and then moved over the
target with :func:`os.replace`, so a crash mid-write leaves the previous
snapshot intact. There is no schema versioning.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from expense_ledger.errors import StorageError
from expense_ledger.storage.interface import ClaimStorage

logger = logging.getLogger("expense_ledger.storage")


class JsonFileStorage(ClaimStorage):
    """
    Persistent whole-snapshot JSON storage.

    Parameters
    ----------
    file_path:
        Path to the JSON file. It is created on the first save; a missing file
        loads as an empty collection.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load_claims(self) -> list[dict[str, Any]]:
        if not self._file_path.exists():
            return []

        try:
            with open(self._file_path, encoding="utf-8") as file_handle:
                data = json.load(file_handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(str(self._file_path), str(exc)) from exc

        if not isinstance(data, list):
            raise StorageError(str(self._file_path), "expected a JSON array of claim records")

        logger.debug(
            "claims_loaded",
            extra={"path": str(self._file_path), "count": len(data)},
        )
        return data

    def save_claims(self, records: list[dict[str, Any]]) -> None:
        temp_path = self._file_path.with_name(self._file_path.name + ".tmp")
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, mode="w", encoding="utf-8") as file_handle:
                json.dump(records, file_handle, indent=2, ensure_ascii=False)
            os.replace(temp_path, self._file_path)
        except OSError as exc:
            raise StorageError(str(self._file_path), str(exc)) from exc

        logger.debug(
            "claims_saved",
            extra={"path": str(self._file_path), "count": len(records)},
        )
