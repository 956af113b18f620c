from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Sequence

from foodfacts_mcp.data_providers.openfoodfacts import OpenFoodFactsClient
from foodfacts_mcp.sampling.gateway import get_response_text
from foodfacts_mcp.sampling.requests import SamplingRequestBuilder
from foodfacts_mcp.schemas import Product, SamplingRequest, ToolResult
from foodfacts_mcp.services.resolver import ProductLookup, ProductResolver

logger = logging.getLogger(__name__)


class SamplingGateway(Protocol):
    async def request_sampling(self, request: SamplingRequest) -> Any: ...


@dataclass(frozen=True)
class ReportFormat:
    """How a tool turns resolved products into text, with and without the model."""

    sampled: Callable[[Sequence[Product], str], str]
    local: Optional[Callable[[Sequence[Product]], str]] = None
    failure_prefix: str = "Sampling failed"


def _analysis_sampled(products: Sequence[Product], text: str) -> str:
    p = products[0]
    return f"# {p.product_name or 'Product'} ({p.brands or 'Unknown'})\n{text}"


def _analysis_local(products: Sequence[Product]) -> str:
    p = products[0]
    return (
        f"# {p.product_name or 'Product'}\n"
        f"Brand: {p.brands or 'Unknown'}\n"
        f"Nutri-Score: {p.nutriscore_grade or 'unknown'}\n"
        f"Ingredients: {p.ingredients_text or 'Not available'}"
    )


def _comparison_title(products: Sequence[Product]) -> str:
    first, second = products
    return f"# {first.product_name or 'Product 1'} vs {second.product_name or 'Product 2'}"


def _comparison_sampled(products: Sequence[Product], text: str) -> str:
    return f"{_comparison_title(products)}\n\n{text}"


def _comparison_local(products: Sequence[Product]) -> str:
    first, second = products
    return (
        f"{_comparison_title(products)}\n"
        f"Nutri-Score: {first.nutriscore_grade or 'unknown'} vs {second.nutriscore_grade or 'unknown'}"
    )


def _recipes_sampled(products: Sequence[Product], text: str) -> str:
    return f"# Recipes using {products[0].product_name or 'this product'}\n\n{text}"


ANALYSIS_REPORT = ReportFormat(sampled=_analysis_sampled, local=_analysis_local)
COMPARISON_REPORT = ReportFormat(sampled=_comparison_sampled, local=_comparison_local)
RECIPE_REPORT = ReportFormat(sampled=_recipes_sampled, failure_prefix="Recipe generation failed")


def error(text: str) -> ToolResult:
    return ToolResult(text=text, is_error=True)


class ToolService:
    """Handlers behind the MCP tools. Every handler returns a ToolResult and never raises."""

    def __init__(
        self,
        lookup: ProductLookup | None = None,
        builder: SamplingRequestBuilder | None = None,
    ) -> None:
        self.lookup = lookup or OpenFoodFactsClient()
        self.resolver = ProductResolver(self.lookup)
        self.builder = builder or SamplingRequestBuilder()

    async def search_products(self, query: str, page: int = 1, page_size: int = 10) -> ToolResult:
        try:
            results = await self.lookup.search_products(query, page or 1, page_size or 10)
        except Exception as exc:
            return error(f"Error: {exc}")
        return ToolResult(text=results.model_dump_json(exclude_none=True))

    async def get_product_by_barcode(self, barcode: str) -> ToolResult:
        try:
            product = await self.lookup.get_product_by_barcode(barcode)
        except Exception as exc:
            return error(f"Error: {exc}")
        if product is None:
            return ToolResult(text=json.dumps(None))
        return ToolResult(text=product.model_dump_json(exclude_none=True))

    async def analyze_product(self, name_or_barcode: str, gateway: SamplingGateway) -> ToolResult:
        if not (name_or_barcode or "").strip():
            return error("Provide a product name or barcode.")

        resolved = await self.resolver.resolve(name_or_barcode)
        if resolved is None:
            return error(f'"{name_or_barcode}" not found. Try searchProducts first.')

        product = resolved.product
        return await self._report(gateway, self.builder.analysis(product), [product], ANALYSIS_REPORT)

    async def compare_products(
        self,
        name_or_barcode1: str,
        name_or_barcode2: str,
        gateway: SamplingGateway,
    ) -> ToolResult:
        if not (name_or_barcode1 or "").strip() or not (name_or_barcode2 or "").strip():
            return error("Provide both products.")

        first, second = await asyncio.gather(
            self.resolver.resolve(name_or_barcode1),
            self.resolver.resolve(name_or_barcode2),
        )
        if first is None:
            return error(f'"{name_or_barcode1}" not found.')
        if second is None:
            return error(f'"{name_or_barcode2}" not found.')

        request = self.builder.comparison(first.product, second.product)
        return await self._report(gateway, request, [first.product, second.product], COMPARISON_REPORT)

    async def suggest_recipes(self, name_or_barcode: str, gateway: SamplingGateway) -> ToolResult:
        if not (name_or_barcode or "").strip():
            return error("Provide a product.")

        resolved = await self.resolver.resolve(name_or_barcode)
        if resolved is None:
            return error(f'"{name_or_barcode}" not found.')

        product = resolved.product
        return await self._report(gateway, self.builder.recipes(product), [product], RECIPE_REPORT)

    @staticmethod
    async def _report(
        gateway: SamplingGateway,
        request: SamplingRequest,
        products: Sequence[Product],
        report: ReportFormat,
    ) -> ToolResult:
        try:
            response = await gateway.request_sampling(request)
        except Exception as exc:
            if report.local is None:
                logger.error("%s: %s", report.failure_prefix, exc)
                return error(f"{report.failure_prefix}: {exc}")
            logger.warning("Sampling unavailable, using local summary: %s", exc)
            return ToolResult(text=report.local(products))
        return ToolResult(text=report.sampled(products, get_response_text(response)))
