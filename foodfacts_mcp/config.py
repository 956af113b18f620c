import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parent.parent
load_dotenv(ROOT_DIR / ".env")


def _as_bool(value: str, default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _as_unit_float(value: str, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return min(1.0, max(0.0, number))


@dataclass(frozen=True)
class Settings:
    off_base_url: str = os.getenv("OFF_BASE_URL", "https://world.openfoodfacts.org").rstrip("/")
    off_user_agent: str = os.getenv("OFF_USER_AGENT", "foodfacts-mcp/0.1")
    off_max_retries: int = int(os.getenv("OFF_MAX_RETRIES", "2"))
    request_timeout_seconds: int = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "12"))
    sampling_model_hint: str = os.getenv("SAMPLING_MODEL_HINT", "claude-3")
    sampling_intelligence_priority: float = _as_unit_float(os.getenv("SAMPLING_INTELLIGENCE_PRIORITY"), 0.9)
    sampling_context_scope: str = os.getenv("SAMPLING_CONTEXT_SCOPE", "thisServer")
    mcp_server_name: str = os.getenv("MCP_SERVER_NAME", "openfoodfacts")
    mcp_transport: str = os.getenv("MCP_TRANSPORT", "stdio")
    mcp_host: str = os.getenv("MCP_HOST", "127.0.0.1")
    mcp_port: int = int(os.getenv("MCP_PORT", "8000"))
    debug_log: bool = _as_bool(os.getenv("DEBUG_LOG", "0"))


settings = Settings()
