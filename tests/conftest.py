from __future__ import annotations

import asyncio

import pytest

from foodfacts_mcp.schemas import Product, SearchResults


class FakeLookup:
    """In-memory stand-in for the OpenFoodFacts client that records every call."""

    def __init__(
        self,
        products: dict[str, Product] | None = None,
        search_hits: dict[str, list[str]] | None = None,
        barcode_error: Exception | None = None,
        search_error: Exception | None = None,
    ) -> None:
        self.products = products or {}
        self.search_hits = search_hits or {}
        self.barcode_error = barcode_error
        self.search_error = search_error
        self.calls: list[tuple] = []

    async def get_product_by_barcode(self, code: str) -> Product | None:
        self.calls.append(("barcode", code))
        await asyncio.sleep(0)
        if self.barcode_error is not None:
            raise self.barcode_error
        return self.products.get(code)

    async def search_products(self, query: str, page: int = 1, page_size: int = 10) -> SearchResults:
        self.calls.append(("search", query, page, page_size))
        await asyncio.sleep(0)
        if self.search_error is not None:
            raise self.search_error
        codes = self.search_hits.get(query, [])[:page_size]
        hits = [Product(barcode=code, product_name=getattr(self.products.get(code), "product_name", None)) for code in codes]
        return SearchResults(products=hits, count=len(hits), page=page, page_size=page_size)


NUTELLA = Product(
    barcode="3017620422003",
    product_name="Nutella",
    brands="Ferrero",
    nutriscore_grade="e",
    ingredients_text="Sugar, palm oil, hazelnuts 13%, skimmed milk powder 8.7%, fat-reduced cocoa 7.4%",
)

OAT_DRINK = Product(
    barcode="7394376616037",
    product_name="Oat Drink",
    brands="Oatly",
    nutriscore_grade="b",
    ingredients_text="Water, oats 10%, rapeseed oil, calcium carbonate",
)


@pytest.fixture
def catalog() -> FakeLookup:
    return FakeLookup(
        products={NUTELLA.barcode: NUTELLA, OAT_DRINK.barcode: OAT_DRINK},
        search_hits={"nutella": [NUTELLA.barcode], "oatly": [OAT_DRINK.barcode]},
    )
