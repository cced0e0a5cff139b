from __future__ import annotations

import codecs
import logging

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from page_digest.core.errors import ParseError

logger = logging.getLogger(__name__)

PARSER_FEATURES = "lxml"


def normalize_charset(charset: str | None) -> str | None:
    """Map a declared charset to Python's canonical codec name.

    lxml only understands canonical names ("iso8859-1", not "latin-1"), and
    BeautifulSoup silently falls back to UTF-8 when lxml rejects a hint.
    Unknown charsets become ``None`` so the document is sniffed instead.
    """

    if not charset:
        return None
    try:
        return codecs.lookup(charset.strip()).name
    except LookupError:
        logger.debug("Unknown charset %r, sniffing instead", charset)
        return None


def parse_html(payload: bytes, *, encoding: str | None = None) -> BeautifulSoup:
    """Parse an HTML byte payload into a BeautifulSoup document tree.

    ``encoding`` is a hint (usually the response charset).
    """

    try:
        return BeautifulSoup(payload, PARSER_FEATURES, from_encoding=normalize_charset(encoding))
    except (ParserRejectedMarkup, ValueError, LookupError) as e:
        raise ParseError(f"failed to parse HTML: {e}") from e
