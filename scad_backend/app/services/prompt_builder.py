from typing import List, Sequence

from scad_backend.app.schemas.llm import ConversationTurn, ImageRequest, TextRequest
from scad_backend.app.services.prompt_templates import (
    IMAGE_FALLBACK_EXPLANATION,
    IMAGE_INSTRUCTION,
    IMAGE_SYSTEM_PROMPT,
    JSON_REMINDER,
    TEXT_FALLBACK_EXPLANATION,
    TEXT_SYSTEM_PROMPT,
)


HISTORY_WINDOW = 4
CODE_PREVIEW_CHARS = 200
TRUNCATION_MARKER = "..."


def trim_history(history: Sequence[ConversationTurn], window: int = HISTORY_WINDOW) -> List[ConversationTurn]:
    """Return the last ``window`` turns in their original order."""
    if window <= 0:
        return []
    return list(history[-window:])


def _preview_code(code: str, limit: int) -> str:
    if len(code) > limit:
        return code[:limit] + TRUNCATION_MARKER
    return code


def _render_history(history: Sequence[ConversationTurn], window: int, code_preview_chars: int) -> str:
    lines = ["Previous conversation:"]
    for turn in trim_history(history, window):
        lines.append(f"{turn.role}: {turn.content}")
        if turn.code:
            lines.append(f"Code: {_preview_code(turn.code, code_preview_chars)}")
    return "\n".join(lines)


def build_prompt(
    request: TextRequest | ImageRequest,
    history_window: int = HISTORY_WINDOW,
    code_preview_chars: int = CODE_PREVIEW_CHARS,
) -> str:
    """Assemble the full prompt for one request.

    Sections, in order: system instruction, trimmed transcript (if any),
    current code (if any), then the new instruction. The output depends only
    on the arguments.
    """
    is_image = isinstance(request, ImageRequest)
    parts = [IMAGE_SYSTEM_PROMPT if is_image else TEXT_SYSTEM_PROMPT]

    if request.history and history_window > 0:
        parts.append(_render_history(request.history, history_window, code_preview_chars))

    if request.current_code:
        parts.append(
            "Current OpenSCAD code (modify it as needed rather than replacing it wholesale):\n"
            f"```\n{request.current_code}\n```"
        )

    if is_image:
        parts.append(f"{IMAGE_INSTRUCTION}\n\n{JSON_REMINDER}")
    else:
        parts.append(f"User request: {request.prompt}\n\n{JSON_REMINDER}")

    return "\n\n".join(parts)


def get_fallback_explanation(request: TextRequest | ImageRequest) -> str:
    if isinstance(request, ImageRequest):
        return IMAGE_FALLBACK_EXPLANATION
    return TEXT_FALLBACK_EXPLANATION
