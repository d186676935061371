from __future__ import annotations

import logging
from typing import List

from toolsmith.llm_client import LLMClient
from toolsmith.llm_parsing import parse_ideas
from toolsmith.llm_prompts import build_ideas_messages

log = logging.getLogger(__name__)


def suggest_ideas(llm: LLMClient, article_text: str) -> List[str]:
    """Ask the model for tool ideas for an article.

    The whole article goes into the request; only the log line is truncated.
    Fewer than five ideas is a valid answer.
    """
    text = article_text or ""
    log.info("ideas: prompt content=%s", text[:500])
    reply = llm.complete(build_ideas_messages(text))
    ideas = parse_ideas(reply)
    log.info("ideas: received %d ideas", len(ideas))
    return ideas
