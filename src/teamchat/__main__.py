"""Entrypoint: python -m teamchat"""
from __future__ import annotations

import logging

import uvicorn

from teamchat.config import settings


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "teamchat.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
