from __future__ import annotations

import logging

from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError

from foodfacts_mcp.config import settings
from foodfacts_mcp.sampling.gateway import McpSamplingGateway
from foodfacts_mcp.schemas import ToolResult
from foodfacts_mcp.services.tool_service import ToolService

logger = logging.getLogger(__name__)


def _to_text(result: ToolResult) -> str:
    # FastMCP reports ToolError as an isError result carrying the same text.
    if result.is_error:
        raise ToolError(result.text)
    return result.text


def register_tools(mcp: FastMCP, service: ToolService) -> None:
    """Register the OpenFoodFacts tools on an MCP server."""

    @mcp.tool(name="searchProducts", description="Search products by name, brand, or category", output_schema=None)
    async def search_products(query: str, page: int = 1, pageSize: int = 10) -> str:
        return _to_text(await service.search_products(query, page, pageSize))

    @mcp.tool(name="getProductByBarcode", description="Get product details by barcode (EAN/UPC)", output_schema=None)
    async def get_product_by_barcode(barcode: str) -> str:
        return _to_text(await service.get_product_by_barcode(barcode))

    @mcp.tool(name="analyzeProduct", description="Get AI nutritional analysis of a product", output_schema=None)
    async def analyze_product(nameOrBarcode: str, ctx: Context) -> str:
        return _to_text(await service.analyze_product(nameOrBarcode, McpSamplingGateway(ctx)))

    @mcp.tool(name="compareProducts", description="Compare two products using AI", output_schema=None)
    async def compare_products(nameOrBarcode1: str, nameOrBarcode2: str, ctx: Context) -> str:
        result = await service.compare_products(nameOrBarcode1, nameOrBarcode2, McpSamplingGateway(ctx))
        return _to_text(result)

    @mcp.tool(name="suggestRecipes", description="Get AI recipe suggestions using a product", output_schema=None)
    async def suggest_recipes(nameOrBarcode: str, ctx: Context) -> str:
        return _to_text(await service.suggest_recipes(nameOrBarcode, McpSamplingGateway(ctx)))

    logger.info("Core OpenFoodFacts tools registered")


def build_server(service: ToolService | None = None) -> FastMCP:
    mcp = FastMCP(settings.mcp_server_name)
    register_tools(mcp, service or ToolService())
    return mcp
