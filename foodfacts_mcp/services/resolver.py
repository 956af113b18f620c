from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Protocol

from foodfacts_mcp.schemas import Product, ResolvedProduct, SearchResults

logger = logging.getLogger(__name__)

BARCODE_PATTERN = re.compile(r"^\d+$")


class ProductLookup(Protocol):
    async def search_products(self, query: str, page: int = 1, page_size: int = 10) -> SearchResults: ...

    async def get_product_by_barcode(self, code: str) -> Optional[Product]: ...


class StageOutcome(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERRORED = "errored"


@dataclass(frozen=True)
class StageResult:
    outcome: StageOutcome
    product: Optional[Product] = None


Stage = Callable[[str], Awaitable[StageResult]]


def is_barcode(identifier: str) -> bool:
    return bool(BARCODE_PATTERN.match(identifier))


class ProductResolver:
    """
    Turns a name or barcode into one product record.

    Stages run in order and each reports found / not found / errored. An errored
    stage is logged and then treated like a miss, so the next stage still runs.
    """

    def __init__(self, lookup: ProductLookup) -> None:
        self.lookup = lookup

    async def resolve(self, identifier: str) -> ResolvedProduct | None:
        query = (identifier or "").strip()
        if not query:
            return None

        for stage in self.stages_for(query):
            result = await stage(query)
            if result.outcome is StageOutcome.FOUND and result.product is not None:
                return ResolvedProduct(product=result.product)
        return None

    def stages_for(self, query: str) -> list[Stage]:
        stages: list[Stage] = []
        if is_barcode(query):
            stages.append(self.barcode_stage)
        stages.append(self.search_stage)
        return stages

    async def barcode_stage(self, query: str) -> StageResult:
        try:
            product = await self.lookup.get_product_by_barcode(query)
        except Exception as exc:
            logger.error("Barcode lookup failed: %s", exc)
            return StageResult(StageOutcome.ERRORED)
        return _as_result(product)

    async def search_stage(self, query: str) -> StageResult:
        try:
            results = await self.lookup.search_products(query, 1, 1)
            barcode = results.products[0].barcode if results and results.products else None
            if not barcode:
                return StageResult(StageOutcome.NOT_FOUND)
            product = await self.lookup.get_product_by_barcode(barcode)
        except Exception as exc:
            logger.error("Search failed: %s", exc)
            return StageResult(StageOutcome.ERRORED)
        return _as_result(product)


def _as_result(product: Optional[Product]) -> StageResult:
    if product is None or product.is_empty():
        return StageResult(StageOutcome.NOT_FOUND)
    return StageResult(StageOutcome.FOUND, product)
