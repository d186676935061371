from __future__ import annotations

import logging
from typing import Optional

from toolsmith.llm_client import LLMClient
from toolsmith.llm_parsing import unwrap_code_fence
from toolsmith.llm_prompts import build_tool_messages
from toolsmith.models import SynthesisResult
from toolsmith.validators import validate_tool

log = logging.getLogger(__name__)


def resolve_goal(idea: Optional[str], requirements: Optional[str]) -> str:
    """Free-text requirements win over the selected idea; neither gives ""."""
    if requirements and requirements.strip():
        return requirements
    if idea and idea.strip():
        return idea
    return ""


def synthesize(
    llm: LLMClient,
    content: str,
    idea: Optional[str] = None,
    requirements: Optional[str] = None,
) -> SynthesisResult:
    """Generate a widget, gate it on the quality rubric and regenerate at most once.

    generate -> validate -> (regenerate with the failing items -> validate) -> return.
    The second pass is returned even when it still fails; its issues come back
    as warnings. Issues from the first pass are never surfaced.
    """
    goal = resolve_goal(idea, requirements)

    code = unwrap_code_fence(llm.complete(build_tool_messages(content, goal)))
    first = validate_tool(code)
    if first.is_valid:
        log.info("synthesize: first pass valid chars=%d", len(code))
        return SynthesisResult(code=code)

    log.info("synthesize: first pass failed issues=%s; regenerating once", first.issues)
    code = unwrap_code_fence(llm.complete(build_tool_messages(content, goal, issues=first.issues)))
    second = validate_tool(code)
    if second.is_valid:
        log.info("synthesize: retry valid chars=%d", len(code))
        return SynthesisResult(code=code)

    log.warning("synthesize: retry still failing issues=%s", second.issues)
    return SynthesisResult(code=code, warnings=list(second.issues))
