"""Concurrent fan-out of one query to many source adapters.

All adapters start together and every one is allowed to settle; a failing
adapter only loses its own contribution.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from app.models import Company, SearchQuery

logger = logging.getLogger(__name__)


class Adapter(Protocol):
    """Anything with a label and an async ``search``."""

    label: str

    async def search(self, query: SearchQuery) -> list[Company]: ...


@dataclass
class FanOutReport:
    """What happened to each adapter in one fan-out."""

    fulfilled: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    counts: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())


async def run_all(
    adapters: list[Adapter],
    query: SearchQuery,
    report: FanOutReport | None = None,
) -> list[Company]:
    """Run every adapter concurrently and pool their entities.

    Args:
        adapters: Adapters in invocation order.
        query: The query every adapter receives.
        report: Optional report filled in with per-adapter outcomes.

    Returns:
        The fulfilled adapters' entities concatenated in adapter order.
        Nothing is deduplicated here.
    """
    if report is None:
        report = FanOutReport()
    if not adapters:
        return []

    results = await asyncio.gather(
        *(adapter.search(query) for adapter in adapters),
        return_exceptions=True,
    )

    pool: list[Company] = []
    for adapter, result in zip(adapters, results):
        if isinstance(result, asyncio.CancelledError):
            raise result
        if isinstance(result, BaseException):
            logger.error(f"{adapter.label} search failed: {result!r}")
            report.failed[adapter.label] = str(result) or type(result).__name__
            continue
        report.fulfilled.append(adapter.label)
        report.counts[adapter.label] = len(result)
        pool.extend(result)

    logger.info(
        f"Fan-out finished: {len(report.fulfilled)} fulfilled, "
        f"{len(report.failed)} failed, {len(pool)} entities pooled"
    )
    return pool
