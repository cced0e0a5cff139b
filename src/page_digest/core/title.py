from __future__ import annotations

from bs4.element import NavigableString, PageElement, PreformattedString, Tag


def _leading_text(node: Tag) -> str:
    child = node.contents[0] if node.contents else None
    # Comments, CDATA and the like are NavigableString subclasses too.
    if isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
        return str(child).strip()
    return ""


def extract_title(root: PageElement) -> str:
    """Return the text of the first ``<title>`` element in document order.

    The first ``title`` element found wins even if it is empty; later
    ``title`` elements are never consulted. Traversal uses an explicit stack
    so deeply nested markup cannot exhaust the interpreter's recursion limit.
    """

    stack: list[PageElement] = [root]
    while stack:
        node = stack.pop()
        if not isinstance(node, Tag):
            continue
        if node.name == "title":
            return _leading_text(node)
        stack.extend(reversed(node.contents))
    return ""
