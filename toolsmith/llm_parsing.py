from __future__ import annotations

import re
from typing import List

_ORDINAL_RE = re.compile(r"^\d+\.\s*")
_FENCE_RE = re.compile(r"^```[\w-]*\s*\n([\s\S]*?)\n?```\s*$")


def parse_ideas(text: str) -> List[str]:
    """Turn a numbered-list completion into an ordered list of ideas.

    Splits on newlines, strips a leading ``N.`` ordinal and surrounding
    whitespace, drops empty lines. Lines without an ordinal are kept as-is;
    the count is whatever the model produced.
    """
    ideas: List[str] = []
    for line in (text or "").splitlines():
        idea = _ORDINAL_RE.sub("", line.strip()).strip()
        if idea:
            ideas.append(idea)
    return ideas


def unwrap_code_fence(text: str) -> str:
    """Return the body of a completion wrapped in a single ```html ... ``` fence.

    Models are told not to use markdown, but some still fence the whole
    answer. Anything that is not exactly one fenced block is returned
    untouched.
    """
    t = (text or "").strip()
    m = _FENCE_RE.match(t)
    if not m:
        return text or ""
    return m.group(1).strip()
