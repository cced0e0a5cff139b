from __future__ import annotations


class PageDigestError(RuntimeError):
    """Base class for failures raised while fetching and digesting a page.

    ``url`` and ``stage`` are filled in by the pipeline as the error travels
    up, so callers can report which page failed and where.
    """

    def __init__(self, message: str, *, url: str | None = None, stage: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.stage = stage

    def with_context(self, *, url: str | None = None, stage: str | None = None) -> "PageDigestError":
        if self.url is None:
            self.url = url
        if self.stage is None:
            self.stage = stage
        return self

    def __str__(self) -> str:
        parts = [p for p in (self.stage, self.url) if p]
        if not parts:
            return self.message
        return f"{' '.join(parts)}: {self.message}"


class EntropyError(PageDigestError):
    pass


class RateLimitError(PageDigestError):
    pass


class TransportError(PageDigestError):
    pass


class HTTPStatusError(PageDigestError):
    def __init__(self, status: int, *, url: str | None = None) -> None:
        super().__init__(f"HTTP {status}", url=url)
        self.status = status


class ParseError(PageDigestError):
    pass


class HashComputeError(PageDigestError):
    pass
