from __future__ import annotations

import logging
from typing import Sequence

from toolsmith.llm_client import LLMClient
from toolsmith.llm_parsing import unwrap_code_fence
from toolsmith.llm_prompts import UPDATE_ACKNOWLEDGEMENT, build_update_messages
from toolsmith.models import ConversationTurn, RefinementResult

log = logging.getLogger(__name__)


def refine(
    llm: LLMClient,
    content: str,
    current_code: str,
    feedback: str,
    history: Sequence[ConversationTurn] = (),
) -> RefinementResult:
    """Apply one round of user feedback to a widget.

    The caller owns the conversation: it passes the history in and stores the
    returned one. History gets the feedback and a fixed acknowledgement, never
    the generated code. No rubric gate runs here.
    """
    prior = list(history)
    reply = llm.complete(build_update_messages(content, current_code, feedback, prior))
    code = unwrap_code_fence(reply)
    new_history = prior + [
        ConversationTurn(role="user", content=feedback),
        ConversationTurn(role="assistant", content=UPDATE_ACKNOWLEDGEMENT),
    ]
    log.info("refine: updated tool chars=%d history_turns=%d", len(code), len(new_history))
    return RefinementResult(code=code, history=new_history)
