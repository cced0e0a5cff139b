from __future__ import annotations

import enum
import logging
from typing import Callable, Iterable

import aiohttp

from page_digest.core.config import FetchSettings
from page_digest.core.digest import BLAKE2B_KEY, DigestEngine
from page_digest.core.errors import PageDigestError
from page_digest.core.fetcher import RateLimitedFetcher
from page_digest.core.html_tree import parse_html
from page_digest.core.models import PageInfo, PageOutcome
from page_digest.core.ratelimit import Deadline
from page_digest.core.title import extract_title

logger = logging.getLogger(__name__)

PAGE_DEADLINE_SECONDS = 30.0


class PipelineStage(str, enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    PARSING = "parsing"
    EXTRACTING = "extracting"
    HASHING = "hashing"
    DONE = "done"
    FAILED = "failed"


StageCallback = Callable[[PipelineStage], None]


async def fetch_page(
    url: str,
    engine: DigestEngine,
    *,
    settings: FetchSettings | None = None,
    session: aiohttp.ClientSession | None = None,
    on_stage: StageCallback | None = None,
) -> PageInfo:
    """Fetch ``url`` and build its PageInfo: fetch, parse, extract the title, hash it.

    A new fetcher (and therefore a fresh token bucket) is built for every
    call. Fetch and rate-limiter waits share one deadline. Errors are
    re-raised unchanged apart from the url/stage context attached to them.
    """

    s = settings or FetchSettings()
    stage = PipelineStage.IDLE

    def advance(nxt: PipelineStage) -> None:
        nonlocal stage
        stage = nxt
        logger.debug("%s: %s", url, nxt.value)
        if on_stage is not None:
            on_stage(nxt)

    try:
        async with RateLimitedFetcher(s.requests_per_second, s.burst, session=session, settings=s) as fetcher:
            deadline = Deadline.after(min(PAGE_DEADLINE_SECONDS, s.timeout_seconds))
            advance(PipelineStage.FETCHING)
            logger.info("Waiting for rate limiter: %s", url)
            result = await fetcher.get(url, deadline=deadline)

        advance(PipelineStage.PARSING)
        doc = parse_html(result.body, encoding=result.charset)

        advance(PipelineStage.EXTRACTING)
        title = extract_title(doc)

        advance(PipelineStage.HASHING)
        digests = engine.hash_title(title)
    except PageDigestError as e:
        failed_at = stage
        advance(PipelineStage.FAILED)
        raise e.with_context(url=url, stage=failed_at.value)

    advance(PipelineStage.DONE)
    logger.info("Fetched %s (status=%s, title=%r)", url, result.status, title)
    return PageInfo(url=url, title=title, digests=digests)


def validate_page(info: PageInfo, engine: DigestEngine) -> bool:
    return engine.validate_integrity(info.title, info.digests.get(BLAKE2B_KEY, ""))


async def run_pages(
    urls: Iterable[str],
    engine: DigestEngine,
    *,
    settings: FetchSettings | None = None,
    session: aiohttp.ClientSession | None = None,
) -> list[PageOutcome]:
    """Process each URL in turn. A failed page is recorded and the loop moves on."""

    outcomes: list[PageOutcome] = []
    for url in urls:
        logger.info("Fetching and parsing %s", url)
        try:
            info = await fetch_page(url, engine, settings=settings, session=session)
        except Exception as e:
            logger.warning("Error fetching %s: %s", url, e)
            outcomes.append(PageOutcome(url=url, error=e))
            continue

        integrity_ok = validate_page(info, engine) if info.title else None
        outcomes.append(PageOutcome(url=url, info=info, integrity_ok=integrity_ok))
    return outcomes
