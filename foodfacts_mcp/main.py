import logging
import sys

from foodfacts_mcp.config import settings
from foodfacts_mcp.server import build_server


def configure_logging() -> None:
    # stdout carries the stdio transport, so logs go to stderr.
    logging.basicConfig(
        level=logging.DEBUG if settings.debug_log else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main() -> None:
    configure_logging()
    mcp = build_server()
    if settings.mcp_transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(transport=settings.mcp_transport, host=settings.mcp_host, port=settings.mcp_port)


if __name__ == "__main__":
    main()
