from __future__ import annotations

from page_digest.core.models import PageInfo, PageOutcome


def format_page_info(info: PageInfo) -> str:
    lines = [f"Site: {info.url}"]
    if not info.title:
        lines.append("No page title found")
        return "\n".join(lines)
    lines.append(f"Title: {info.title}")
    lines.append("Digests:")
    for name in sorted(info.digests):
        lines.append(f"  {name}: {info.digests[name]}")
    return "\n".join(lines)


def format_outcome(outcome: PageOutcome) -> str:
    if outcome.info is None:
        return f"Site: {outcome.url}\nError: {outcome.error}"
    text = format_page_info(outcome.info)
    if outcome.integrity_ok is not None:
        text += f"\nIntegrity check: {'ok' if outcome.integrity_ok else 'FAILED'}"
    return text
