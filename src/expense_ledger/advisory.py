# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
Advisory sanity check for expense claims.

An external text generator (typically an LLM) is asked for a one-line
reviewer hint about a claim. Its answer is informational only: it never
changes a claim, a status or a budget figure, and any failure is absorbed
here and replaced with a fixed fallback string.

The module does NOT import any vendor SDK; it accepts the client as a
structural type so any object with an async ``complete(prompt)`` method
works.

Quick start::

    advisor = ExpenseAdvisor(client=my_llm_client)
    hint = asyncio.run(advisor.analyze(AdvisoryRequest(
        items=claim.items,
        total_amount=claim.total_amount,
        project=project,
        category_name="Meals",
    )))
"""
from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from expense_ledger.config import AdvisoryConfig
from expense_ledger.types import InvoiceItem, Money, Project, ProjectType

logger = logging.getLogger("expense_ledger.advisory")

GRANT_MEAL_WARNING = (
    "Research grants usually do not fund meal expenses; "
    "check the approved budget items before submitting."
)


# ---------------------------------------------------------------------------
# Structural protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class AdvisoryClient(Protocol):
    """Structural protocol for any text generator used as an advisory oracle."""

    async def complete(self, prompt: str) -> str:
        """Return free text for ``prompt``."""
        ...


# ---------------------------------------------------------------------------
# Request model
# ---------------------------------------------------------------------------


class AdvisoryRequest(BaseModel, frozen=True):
    """Everything the advisory oracle is shown about one claim."""

    items: tuple[InvoiceItem, ...] = Field(default_factory=tuple)
    total_amount: Money
    project: Project
    category_name: str


def build_prompt(request: AdvisoryRequest, threshold: Decimal, quote_threshold: Decimal) -> str:
    """
    Render the reviewer prompt for one claim.

    Args:
        request: The claim details.
        threshold: Purchase request threshold.
        quote_threshold: Amount above which a vendor quote is usually needed.
    """
    items_description = ", ".join(
        f"{item.name} ({item.quantity} x ${item.unit_price:.2f})" for item in request.items
    )
    return (
        "You are an accounting reviewer at a public university. "
        "Check whether this invoice claim looks reasonable.\n\n"
        f"Project type: {request.project.type.label()}\n"
        f"Project name: {request.project.name}\n"
        f"Category: {request.category_name}\n"
        f"Invoice total: {request.total_amount:.2f}\n"
        f"Invoice items: {items_description}\n\n"
        "Give one short reminder or suggestion based on common university "
        "reimbursement rules. Pay attention to:\n"
        "1. Whether the amount is reasonable.\n"
        "2. Whether the items fit the category.\n"
        "3. Per-person limits on meal expenses.\n"
        f"4. Whether a vendor quote is needed above {quote_threshold:.0f}.\n"
        f"5. Whether a purchase request is needed above {threshold:.0f}.\n\n"
        "Answer politely in at most 60 words."
    )


def static_advisories(project: Project, category: str) -> list[str]:
    """
    Return offline advisory hints that need no external call.

    Grant projects filing meal expenses get a warning.
    """
    hints: list[str] = []
    if project.type is ProjectType.GRANT and category == "meal":
        hints.append(GRANT_MEAL_WARNING)
    return hints


# ---------------------------------------------------------------------------
# ExpenseAdvisor
# ---------------------------------------------------------------------------


class ExpenseAdvisor:
    """
    Best-effort advisory text for a claim.

    ``analyze`` never raises. It returns:

    - ``config.disabled_text`` when no client is configured,
    - the client's answer, stripped,
    - ``config.empty_text`` when the answer is empty,
    - ``config.fallback_text`` on any client error or timeout.
    """

    def __init__(
        self,
        client: AdvisoryClient | None = None,
        config: AdvisoryConfig | None = None,
        threshold: Decimal = Decimal("15000"),
    ) -> None:
        self._client = client
        self._config = config or AdvisoryConfig()
        self._threshold = threshold

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def analyze(self, request: AdvisoryRequest) -> str:
        if self._client is None:
            return self._config.disabled_text

        prompt = build_prompt(request, self._threshold, self._config.quote_threshold)
        try:
            answer = await asyncio.wait_for(
                self._client.complete(prompt),
                timeout=self._config.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "advisory_timeout",
                extra={
                    "project_id": request.project.id,
                    "timeout_seconds": self._config.timeout_seconds,
                },
            )
            return self._config.fallback_text
        except Exception as exc:  # noqa: BLE001 - advisory failures never escape
            logger.warning(
                "advisory_failed",
                extra={"project_id": request.project.id, "error": repr(exc)},
            )
            return self._config.fallback_text

        text = (answer or "").strip() if isinstance(answer, str) else ""
        if not text:
            return self._config.empty_text

        logger.info(
            "advisory_received",
            extra={"project_id": request.project.id, "length": len(text)},
        )
        return text
