from __future__ import annotations

import logging
from typing import Any

from fastmcp import Context
from mcp import types as mcp_types

from foodfacts_mcp.schemas import SamplingRequest

logger = logging.getLogger(__name__)


class SamplingUnavailableError(Exception):
    """Raised when the connected client cannot serve sampling requests."""


class McpSamplingGateway:
    """Sends sampling requests back to the MCP client attached to a tool call."""

    def __init__(self, ctx: Context) -> None:
        self.ctx = ctx

    async def request_sampling(self, request: SamplingRequest) -> mcp_types.CreateMessageResult:
        try:
            session = self.ctx.session
        except (RuntimeError, ValueError) as exc:
            raise SamplingUnavailableError("No client session attached to this request") from exc

        capability = mcp_types.ClientCapabilities(sampling=mcp_types.SamplingCapability())
        if not session.check_client_capability(capability):
            raise SamplingUnavailableError("Client does not support sampling")

        logger.debug(
            "sampling request max_tokens=%d temperature=%.2f hints=%s",
            request.max_tokens,
            request.temperature,
            list(request.model_preferences.hints),
        )
        return await session.create_message(
            messages=to_mcp_messages(request),
            max_tokens=request.max_tokens,
            system_prompt=request.system_prompt,
            include_context=request.include_context,
            temperature=request.temperature,
            model_preferences=mcp_types.ModelPreferences(
                hints=[mcp_types.ModelHint(name=name) for name in request.model_preferences.hints],
                intelligencePriority=request.model_preferences.intelligence_priority,
            ),
        )


def to_mcp_messages(request: SamplingRequest) -> list[mcp_types.SamplingMessage]:
    return [
        mcp_types.SamplingMessage(
            role=message.role,
            content=mcp_types.TextContent(type="text", text=message.text),
        )
        for message in request.messages
    ]


def get_response_text(response: Any) -> str:
    content = getattr(response, "content", None)
    if isinstance(content, list):
        parts = [getattr(item, "text", None) for item in content]
        return "".join(part for part in parts if isinstance(part, str))
    text = getattr(content, "text", None)
    return text if isinstance(text, str) else ""
