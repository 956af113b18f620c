from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from foodfacts_mcp.config import settings
from foodfacts_mcp.schemas import Product, SearchResults

logger = logging.getLogger(__name__)

SEARCH_FIELDS = [
    "code",
    "product_name",
    "brands",
    "nutriscore_grade",
    "categories",
    "quantity",
    "image_url",
]


class OpenFoodFactsError(Exception):
    """Raised when the product database cannot be reached or answers badly."""


class OpenFoodFactsClient:
    SEARCH_PATH = "/cgi/search.pl"
    PRODUCT_PATH = "/api/v2/product/{code}.json"

    def __init__(self, base_url: str | None = None, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.base_url = (base_url or settings.off_base_url).rstrip("/")
        self.timeout = settings.request_timeout_seconds
        self.max_retries = max(1, settings.off_max_retries)
        self.user_agent = settings.off_user_agent
        self.transport = transport
        self.last_error: str = ""
        self.last_status: int | None = None
        self.last_url: str = ""

    async def search_products(self, query: str, page: int = 1, page_size: int = 10) -> SearchResults:
        params = {
            "search_terms": query.strip(),
            "search_simple": "1",
            "action": "process",
            "json": "1",
            "page": str(max(1, int(page))),
            "page_size": str(max(1, int(page_size))),
            "fields": ",".join(SEARCH_FIELDS),
        }
        payload = await self._get_json(self.SEARCH_PATH, params=params)
        products = [Product.model_validate(item) for item in payload.get("products", []) or []]
        logger.debug("[OFF] returned_products=%d query='%s'", len(products), query)
        return SearchResults(
            products=products,
            count=_to_int(payload.get("count"), len(products)),
            page=_to_int(payload.get("page"), page),
            page_size=_to_int(payload.get("page_size"), page_size),
        )

    async def get_product_by_barcode(self, code: str) -> Product | None:
        code = str(code).strip()
        if not code:
            return None
        payload = await self._get_json(self.PRODUCT_PATH.format(code=code), missing_ok=True)
        if not payload or not payload.get("product") or payload.get("status") in {0, "0"}:
            logger.debug("[OFF] product not found code=%s", code)
            return None
        record = dict(payload["product"])
        record.setdefault("code", payload.get("code", code))
        return Product.model_validate(record)

    async def _get_json(
        self,
        path: str,
        params: dict[str, str] | None = None,
        missing_ok: bool = False,
    ) -> dict[str, Any]:
        self.last_error = ""
        self.last_status = None
        self.last_url = ""
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        timeout = httpx.Timeout(connect=10.0, read=max(20.0, float(self.timeout)), write=10.0, pool=10.0)

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=headers,
            transport=self.transport,
        ) as client:
            for attempt in range(1, self.max_retries + 1):
                try:
                    response = await client.get(path, params=params)
                    self.last_status = response.status_code
                    self.last_url = str(response.request.url)
                    logger.debug(
                        "[OFF] attempt=%d/%d status=%s url=%s",
                        attempt,
                        self.max_retries,
                        self.last_status,
                        self.last_url,
                    )
                    if missing_ok and response.status_code == 404:
                        return {}
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as exc:
                    self.last_error = f"OpenFoodFacts HTTP {exc.response.status_code}"
                    raise OpenFoodFactsError(self.last_error) from exc
                except httpx.ReadTimeout as exc:
                    self.last_error = "OpenFoodFacts network error: ReadTimeout"
                    logger.debug("[OFF] attempt=%d/%d timeout path=%s", attempt, self.max_retries, path)
                    if attempt < self.max_retries:
                        await asyncio.sleep(0.6 * attempt)
                        continue
                    raise OpenFoodFactsError(self.last_error) from exc
                except httpx.HTTPError as exc:
                    self.last_error = f"OpenFoodFacts network error: {exc.__class__.__name__}"
                    raise OpenFoodFactsError(self.last_error) from exc
                except ValueError as exc:
                    self.last_error = "OpenFoodFacts returned invalid JSON"
                    raise OpenFoodFactsError(self.last_error) from exc
        raise OpenFoodFactsError(self.last_error or "OpenFoodFacts request failed")


def _to_int(value: Any, default: int) -> int:
    try:
        if value is None or value == "":
            return default
        return int(value)
    except (TypeError, ValueError):
        return default
