"""Run the storefront: ``python -m storefront``."""
from __future__ import annotations

import asyncio

from storefront.api.api_server import run_api_server
from storefront.core.logging_config import setup_logging


def main() -> None:
    setup_logging()
    asyncio.run(run_api_server())


if __name__ == "__main__":
    main()
