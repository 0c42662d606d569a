"""Recover ``{code, explanation}`` from raw model output.

Models do not always honour the JSON contract: some wrap the object in prose,
some answer with a fenced block, some return bare code. Each strategy below is
a pure function ``(text, fallback_explanation) -> GenerationResult | None``;
``recover_response`` tries them in order and the first result wins. The last
strategy always succeeds, so recovery never fails.
"""

import json
import re
from typing import Callable, Optional, Sequence

from loguru import logger

from scad_backend.app.schemas.llm import GenerationResult
from scad_backend.app.services.prompt_templates import TEXT_FALLBACK_EXPLANATION


# Greedy on purpose: first "{" to last "}", no brace balancing. Trailing prose
# containing braces is captured too and then fails to parse.
_JSON_SPAN = re.compile(r"\{[\s\S]*\}")
# Any language tag alone on the opening fence line, or an OpenSCAD tag
# followed by code on the same line.
_FENCED_BLOCK = re.compile(r"```(?:[\w+#.-]+[ \t]*\r?\n|(?:openscad|scad)[ \t]+|\r?\n)?([\s\S]*?)```")
_ANY_FENCED_BLOCK = re.compile(r"```[\s\S]*?```")

RecoveryStrategy = Callable[[str, str], Optional[GenerationResult]]


def _text_field(payload: dict, key: str) -> str:
    value = payload.get(key)
    return value if isinstance(value, str) else ""


def extract_json_object(text: str, fallback_explanation: str) -> Optional[GenerationResult]:
    match = _JSON_SPAN.search(text)
    if not match:
        return None
    try:
        payload = json.loads(match.group(0))
    except (ValueError, RecursionError):
        return None
    if not isinstance(payload, dict):
        return None

    explanation = _text_field(payload, "explanation")
    return GenerationResult(
        code=_text_field(payload, "code"),
        explanation=explanation if explanation.strip() else fallback_explanation,
    )


def extract_fenced_block(text: str, fallback_explanation: str) -> Optional[GenerationResult]:
    match = _FENCED_BLOCK.search(text)
    if not match:
        return None
    remainder = _ANY_FENCED_BLOCK.sub("", text).strip()
    return GenerationResult(
        code=match.group(1).strip(),
        explanation=remainder or fallback_explanation,
    )


def use_raw_text(text: str, fallback_explanation: str) -> Optional[GenerationResult]:
    return GenerationResult(code=text, explanation=fallback_explanation)


RECOVERY_CHAIN: Sequence[RecoveryStrategy] = (
    extract_json_object,
    extract_fenced_block,
    use_raw_text,
)


def recover_response(
    text: str,
    fallback_explanation: str = TEXT_FALLBACK_EXPLANATION,
    strategies: Sequence[RecoveryStrategy] = RECOVERY_CHAIN,
) -> GenerationResult:
    for strategy in strategies:
        result = strategy(text, fallback_explanation)
        if result is not None:
            if strategy is not strategies[0]:
                logger.debug(f"Model response recovered via {strategy.__name__}")
            return result
    # Only reachable with a custom chain lacking a catch-all
    return use_raw_text(text, fallback_explanation)
