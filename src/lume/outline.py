"""Document outline extraction for section navigation."""

from __future__ import annotations

import re

from lume.models import OutlineItem

HEADING_LEVELS = {"section": 1, "subsection": 2, "subsubsection": 3}
LABEL_LEVEL = 4

# \section[short]{Title}, starred forms, one level of nested braces in titles
_MARKER = re.compile(
    r"\\(?P<kind>section|subsection|subsubsection)\*?\s*(?:\[[^\]]*\])?\s*"
    r"\{(?P<title>[^{}]*(?:\{[^{}]*\}[^{}]*)*)\}"
    r"|\\label\s*\{(?P<label>[^{}]+)\}"
)
# A % that is not escaped starts a comment
_COMMENT = re.compile(r"(?<!\\)%.*$")


def extract_outline(source: str) -> list[OutlineItem]:
    """Return headings and labels in document order.

    Lines are numbered from 1. Sections, subsections and subsubsections get
    levels 1 to 3 and labels level 4, titled with their key.
    """
    items: list[OutlineItem] = []
    for number, line in enumerate(source.splitlines(), start=1):
        code = _COMMENT.sub("", line)
        for match in _MARKER.finditer(code):
            if match.group("label"):
                items.append(
                    OutlineItem(title=match.group("label").strip(), level=LABEL_LEVEL, line=number)
                )
            else:
                items.append(
                    OutlineItem(
                        title=match.group("title").strip(),
                        level=HEADING_LEVELS[match.group("kind")],
                        line=number,
                    )
                )
    return items
