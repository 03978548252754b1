"""Entry point for running the API server.

Usage:
    python -m pantry_recipes
"""
from __future__ import annotations

import logging

import uvicorn

from .config import DEFAULT_APP_CONFIG


def main() -> None:
    logging.basicConfig(
        level=DEFAULT_APP_CONFIG.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "pantry_recipes.app:create_app",
        factory=True,
        host=DEFAULT_APP_CONFIG.host,
        port=DEFAULT_APP_CONFIG.port,
        log_level=DEFAULT_APP_CONFIG.log_level,
        reload=DEFAULT_APP_CONFIG.is_development,
    )


if __name__ == "__main__":
    main()
