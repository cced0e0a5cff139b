from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class PageInfo:
    url: str
    title: str
    digests: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "digests", MappingProxyType(dict(self.digests)))

    def to_dict(self) -> dict[str, object]:
        return {"url": self.url, "title": self.title, "digests": dict(self.digests)}


@dataclass(frozen=True)
class PageOutcome:
    url: str
    info: PageInfo | None = None
    error: Exception | None = None
    integrity_ok: bool | None = None

    @property
    def ok(self) -> bool:
        return self.info is not None and self.error is None
