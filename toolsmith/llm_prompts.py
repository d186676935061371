from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from toolsmith.models import ConversationTurn

IDEAS_SYSTEM_PROMPT = (
    "You are an expert at creating interactive web tools for blog content. "
    "Given a blog post, suggest exactly 5 interactive tool ideas that would add real value for its readers. "
    "Each idea must be short, directly relevant to the post's topic, distinct from the others, "
    "technically feasible as a single self-contained HTML/CSS/JS widget, and embeddable in a blog page "
    "(for example calculators, quizzes, checklists, comparison charts or planners). "
    "Respond with a numbered list of 5 short, clear tool ideas, one per line. "
    "Do not include explanations or markdown."
)

TOOL_SYSTEM_PROMPT = """You are an expert at creating highly engaging, modern, and interactive web tools for blog content.
Given a blog post and user requirements, generate a complete, production-quality embeddable widget that is directly relevant to the post and gives readers real value.

QUALITY RUBRIC (every item is mandatory):

1. CONTENT RELEVANCE
- Build the tool around the facts, numbers and vocabulary of the blog post.
- The tool must help the reader apply, explore or test what the post teaches.

2. USER EXPERIENCE
- Clear title, one-line instructions and an obvious primary action.
- Immediate, dynamic feedback on every interaction; multiple steps or features where they fit.
- Show progress, results and reset paths; never leave the reader at a dead end.

3. TECHNICAL QUALITY
- Output one complete HTML document: <!DOCTYPE html>, <html>, <head>, <body> and a closing </html>.
- Inline all CSS in <style> and all JS in <script>; no external scripts, stylesheets or fonts beyond Inter.
- Wrap logic that can fail in try { ... } catch (error) { ... } and show a friendly message.
- Every <input> carries required and, where it applies, min/max/pattern; validate before computing.
- If you use fetch(), show a loading state (a "loading" class or indicator) while it runs.

4. VISUAL DESIGN
- Clean, modern black and white style with the Inter font and generous spacing.
- Colour only for clear focus and active states.
- Responsive: use width: 100% containers and @media rules for small screens.

5. ACCESSIBILITY
- Semantic elements, a <label> for every control, aria-label / aria-live / role attributes where they help.
- Text contrast of at least 4.5:1; never use light grey text such as #999 or #ccc on white.
- Everything usable with the keyboard, with visible focus styles.

6. SECURITY
- No eval, no inline event-handler attributes, no innerHTML with user input (use textContent).
- No tracking, no network calls to third parties.

Output only the raw HTML document with its CSS and JS. Do not output markdown, triple backticks or explanations."""

# Concrete fix for each rubric issue the validator can report.
ISSUE_FIXES: Dict[str, str] = {
    "Missing HTML structure": "Return a complete document that starts with <!DOCTYPE html><html> and ends with </html>.",
    "Missing ARIA attributes for accessibility": "Add aria-label, aria-live or role attributes to controls and result regions.",
    "Missing responsive design elements": "Add width: 100% containers and at least one @media rule for narrow screens.",
    "Missing error handling": "Wrap the tool's logic in try { ... } catch (error) { ... } blocks and show a friendly error message.",
    "Missing input validation": "Mark every <input> as required and validate values (min/max/pattern) before using them.",
    "Missing loading states for async operations": "Show a loading indicator (a 'loading' class or element) while fetch() calls run.",
    "Potential color contrast issues": "Replace light grey colours such as #777, #999 or #ccc with dark text that meets 4.5:1 contrast.",
}

UPDATE_ACKNOWLEDGEMENT = "Tool updated based on your feedback."


def build_ideas_messages(article_text: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": IDEAS_SYSTEM_PROMPT},
        {"role": "user", "content": f"Suggest 5 interactive tool ideas for this blog post: {article_text}"},
    ]


def build_corrective_directive(issues: Iterable[str]) -> str:
    lines = [
        "",
        "",
        "CORRECTIONS REQUIRED: a previous attempt failed these quality checks. "
        "Your new output must fix every one of them:",
    ]
    for issue in issues:
        fix = ISSUE_FIXES.get(issue, "Fix this problem.")
        lines.append(f"- {issue}: {fix}")
    return "\n".join(lines)


def build_tool_messages(content: str, goal: str, issues: Sequence[str] = ()) -> List[Dict[str, str]]:
    system = TOOL_SYSTEM_PROMPT
    if issues:
        system += build_corrective_directive(issues)
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": f"Blog content: {content}\n\nUser requirements: {goal}"},
    ]


def build_update_messages(
    content: str,
    current_code: str,
    feedback: str,
    history: Sequence[ConversationTurn],
) -> List[Dict[str, str]]:
    system = (
        "You are an expert at updating interactive tools for blog content. "
        f"Here is the original blog post: {content}. "
        f"Here is the current tool code: {current_code}. "
        f"The user wants the following changes: {feedback}. "
        "Please update the tool accordingly. Return only the updated, complete HTML, CSS and JS code, "
        "no explanations or markdown. Output a complete, embeddable widget; "
        "do not output only JavaScript or code blocks."
    )
    messages = [{"role": "system", "content": system}]
    messages.extend({"role": turn.role, "content": turn.content} for turn in history)
    messages.append({"role": "user", "content": feedback})
    return messages
