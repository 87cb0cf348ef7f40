# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from expense_ledger.storage.file import JsonFileStorage
from expense_ledger.storage.interface import ClaimStorage
from expense_ledger.storage.memory import MemoryStorage

__all__ = ["ClaimStorage", "JsonFileStorage", "MemoryStorage"]
