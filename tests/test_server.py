import asyncio

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from foodfacts_mcp.sampling.requests import SamplingRequestBuilder
from foodfacts_mcp.schemas import SamplingPreferences
from foodfacts_mcp.server import build_server
from foodfacts_mcp.services.tool_service import ToolService

from conftest import FakeLookup, NUTELLA


def test_registers_core_tools(catalog):
    async def names():
        async with Client(build_server(ToolService(lookup=catalog))) as client:
            return {tool.name for tool in await client.list_tools()}

    assert asyncio.run(names()) == {
        "searchProducts",
        "getProductByBarcode",
        "analyzeProduct",
        "compareProducts",
        "suggestRecipes",
    }


def test_blank_input_is_an_error_result(catalog):
    async def call():
        async with Client(build_server(ToolService(lookup=catalog))) as client:
            await client.call_tool("analyzeProduct", {"nameOrBarcode": " "})

    with pytest.raises(ToolError, match="Provide a product name or barcode."):
        asyncio.run(call())


def test_analyze_without_sampling_client_uses_local_summary():
    lookup = FakeLookup(products={NUTELLA.barcode: NUTELLA})

    async def call():
        async with Client(build_server(ToolService(lookup=lookup))) as client:
            return await client.call_tool("analyzeProduct", {"nameOrBarcode": NUTELLA.barcode})

    result = asyncio.run(call())
    text = result.content[0].text
    assert text.startswith("# Nutella\nBrand: Ferrero")


def make_sampled_server(lookup):
    builder = SamplingRequestBuilder(SamplingPreferences())
    return build_server(ToolService(lookup=lookup, builder=builder))


def test_analyze_returns_plain_text_only(catalog):
    async def handler(messages, params, context):
        return "MODEL TEXT"

    async def call():
        async with Client(make_sampled_server(catalog), sampling_handler=handler) as client:
            return await client.call_tool("analyzeProduct", {"nameOrBarcode": "nutella"})

    result = asyncio.run(call())
    assert result.content[0].text == "# Nutella (Ferrero)\nMODEL TEXT"
    assert result.structured_content is None


def test_compare_sends_sampling_request_to_client(catalog):
    seen = {}

    async def handler(messages, params, context):
        seen["params"] = params
        seen["messages"] = messages
        return "Oat drink wins."

    async def call():
        async with Client(make_sampled_server(catalog), sampling_handler=handler) as client:
            return await client.call_tool(
                "compareProducts",
                {"nameOrBarcode1": "nutella", "nameOrBarcode2": "oatly"},
            )

    result = asyncio.run(call())
    assert result.content[0].text == "# Nutella vs Oat Drink\n\nOat drink wins."

    params = seen["params"]
    assert params.temperature == 0.2
    assert params.maxTokens == 2000
    assert params.includeContext == "thisServer"
    assert [hint.name for hint in params.modelPreferences.hints] == ["claude-3"]
    assert params.modelPreferences.intelligencePriority == 0.9
    assert params.systemPrompt.startswith("Compare:")
    assert seen["messages"][0].role == "user"
    assert seen["messages"][0].content.text.startswith("Compare:\n\n1:\n")
