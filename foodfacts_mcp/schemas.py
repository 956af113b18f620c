from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


Role = Literal["user", "assistant"]
ContextScope = Literal["thisServer"]


class Product(BaseModel):
    """OpenFoodFacts product record. Every field may be missing."""

    model_config = ConfigDict(extra="allow")

    barcode: Optional[str] = None
    product_name: Optional[str] = None
    brands: Optional[str] = None
    nutriscore_grade: Optional[str] = None
    ingredients_text: Optional[str] = None
    allergens: Optional[str] = None
    categories: Optional[str] = None
    quantity: Optional[str] = None
    nutriments: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _code_as_barcode(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("barcode") and data.get("code"):
            data = {**data, "barcode": str(data["code"])}
        return data

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True, exclude_defaults=True)


class SearchResults(BaseModel):
    products: list[Product] = Field(default_factory=list)
    count: int = 0
    page: int = 1
    page_size: int = 10


class ResolvedProduct(BaseModel):
    product: Product

    @model_validator(mode="after")
    def _product_not_empty(self) -> "ResolvedProduct":
        if self.product.is_empty():
            raise ValueError("resolved product must not be empty")
        return self


class SamplingMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role = "user"
    text: str


class ModelPreferences(BaseModel):
    model_config = ConfigDict(frozen=True)

    hints: tuple[str, ...] = ()
    intelligence_priority: float = Field(default=0.9, ge=0.0, le=1.0)


class SamplingRequest(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    messages: tuple[SamplingMessage, ...]
    system_prompt: str
    model_preferences: ModelPreferences
    include_context: ContextScope = "thisServer"
    temperature: float = Field(ge=0.0, le=1.0)
    max_tokens: int = Field(gt=0)


class SamplingPreferences(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_hint: str = "claude-3"
    intelligence_priority: float = Field(default=0.9, ge=0.0, le=1.0)
    context_scope: ContextScope = "thisServer"


class ToolResult(BaseModel):
    text: str
    is_error: bool = False
