from __future__ import annotations

import json

from foodfacts_mcp.config import settings
from foodfacts_mcp.sampling.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    COMPARISON_SYSTEM_PROMPT,
    RECIPE_SYSTEM_PROMPT,
    RECIPE_USER_TEMPLATE,
)
from foodfacts_mcp.schemas import (
    ModelPreferences,
    Product,
    SamplingMessage,
    SamplingPreferences,
    SamplingRequest,
)


def default_preferences() -> SamplingPreferences:
    return SamplingPreferences(
        model_hint=settings.sampling_model_hint,
        intelligence_priority=settings.sampling_intelligence_priority,
        context_scope=settings.sampling_context_scope,
    )


class SamplingRequestBuilder:
    """Builds the analysis, comparison and recipe sampling requests."""

    def __init__(self, preferences: SamplingPreferences | None = None) -> None:
        self.preferences = preferences or default_preferences()

    def analysis(self, product: Product) -> SamplingRequest:
        return self._request(
            text=f"Analyze:\n\n{_product_json(product, indent=2)}",
            system_prompt=ANALYSIS_SYSTEM_PROMPT,
            temperature=0.3,
            max_tokens=1500,
        )

    def comparison(self, first: Product, second: Product) -> SamplingRequest:
        return self._request(
            text=f"Compare:\n\n1:\n{_product_json(first)}\n\n2:\n{_product_json(second)}",
            system_prompt=COMPARISON_SYSTEM_PROMPT,
            temperature=0.2,
            max_tokens=2000,
        )

    def recipes(self, product: Product) -> SamplingRequest:
        text = RECIPE_USER_TEMPLATE.format(
            name=product.product_name or "n/a",
            brand=product.brands or "n/a",
            quantity=product.quantity or "n/a",
            categories=product.categories or "n/a",
            ingredients=product.ingredients_text or "n/a",
            allergens=product.allergens or "none listed",
        ).strip()
        return self._request(
            text=text,
            system_prompt=RECIPE_SYSTEM_PROMPT.strip(),
            temperature=0.7,
            max_tokens=1500,
        )

    def _request(self, text: str, system_prompt: str, temperature: float, max_tokens: int) -> SamplingRequest:
        return SamplingRequest(
            messages=(SamplingMessage(role="user", text=text),),
            system_prompt=system_prompt,
            model_preferences=ModelPreferences(
                hints=(self.preferences.model_hint,),
                intelligence_priority=self.preferences.intelligence_priority,
            ),
            include_context=self.preferences.context_scope,
            temperature=temperature,
            max_tokens=max_tokens,
        )


def _product_json(product: Product, indent: int | None = None) -> str:
    return json.dumps(product.model_dump(exclude_none=True), indent=indent, ensure_ascii=False)
