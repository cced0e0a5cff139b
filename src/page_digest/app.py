from __future__ import annotations

import asyncio
import logging
import sys

import aiohttp

from page_digest.core.config import AppConfig
from page_digest.core.digest import DigestEngine
from page_digest.core.errors import EntropyError
from page_digest.core.logging_config import configure_logging
from page_digest.core.models import PageOutcome
from page_digest.core.pipeline import run_pages
from page_digest.report import format_outcome

logger = logging.getLogger(__name__)

DEFAULT_URLS = [
    "https://golang.org",
    "https://pkg.go.dev",
]


async def _run(config: AppConfig, engine: DigestEngine, urls: list[str]) -> list[PageOutcome]:
    timeout = aiohttp.ClientTimeout(total=config.fetch.timeout_seconds)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        return await run_pages(urls, engine, settings=config.fetch, session=session)


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    urls = [u.strip() for u in args if u.strip()] or list(DEFAULT_URLS)

    config = AppConfig.load()
    configure_logging(config)

    try:
        engine = DigestEngine()
    except EntropyError as e:
        logger.error("Failed to initialize digest engine: %s", e)
        return 1

    logger.info("Digest engine ready, salt=%s", engine.salt_hex)
    for outcome in asyncio.run(_run(config, engine, urls)):
        print(format_outcome(outcome))
        print("---")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
