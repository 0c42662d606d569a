import asyncio
from pathlib import Path
from typing import Optional, Sequence, Union

from loguru import logger

from scad_backend.llm import GenerationFailure, generate_response
from scad_backend.app.config.settings import Settings, get_settings
from scad_backend.app.schemas.llm import (
    ConversationTurn,
    GenerationResult,
    ImageRequest,
    SessionContext,
    TextRequest,
)
from scad_backend.app.services.prompt_builder import build_prompt, get_fallback_explanation
from scad_backend.app.services.response_recoverer import recover_response
from scad_backend.app.utils.image_encoding import encode_image
from scad_backend.app.utils.llm_logger import append_prompt_response


TEXT_FAILURE_PREFIX = "Failed to generate code: "
IMAGE_FAILURE_PREFIX = "Failed to process image: "


async def generate_openscad(
    request: Union[TextRequest, ImageRequest],
    context: SessionContext,
    settings: Optional[Settings] = None,
) -> GenerationResult:
    """Run one request through prompt building, the model call and recovery.

    Raises GenerationFailure when the model could not be reached. Malformed
    responses never raise; they degrade to a best-effort result.
    """
    settings = settings or get_settings()
    is_image = isinstance(request, ImageRequest)
    kind = "image" if is_image else "text"
    model = context.model or settings.GEMINI_MODEL

    prompt = build_prompt(
        request,
        history_window=settings.HISTORY_WINDOW,
        code_preview_chars=settings.HISTORY_CODE_PREVIEW_CHARS,
    )
    logger.info(f"Generating OpenSCAD ({kind}) with {model}: prompt={len(prompt)} chars, history={len(request.history)} turns")

    try:
        response = await asyncio.to_thread(
            generate_response,
            prompt,
            context.api_key,
            request.image if is_image else None,
            model,
            settings.GEMINI_TEMPERATURE,
        )
    except (TypeError, AttributeError):
        # Programming errors, not transport failures
        raise
    except Exception as exc:
        prefix = IMAGE_FAILURE_PREFIX if is_image else TEXT_FAILURE_PREFIX
        cause = exc.message if isinstance(exc, GenerationFailure) else (str(exc) or type(exc).__name__)
        logger.error(f"Gemini API error: {cause}")
        raise GenerationFailure(f"{prefix}{cause}") from exc

    if settings.LLM_LOG_ENABLED:
        try:
            append_prompt_response(prompt, response, kind, model=model, settings=settings)
        except OSError as exc:
            logger.warning(f"Could not write LLM response log: {exc}")

    return recover_response(response, get_fallback_explanation(request))


async def generate_from_text(
    prompt: str,
    current_code: str,
    history: Sequence[ConversationTurn],
    context: SessionContext,
    settings: Optional[Settings] = None,
) -> GenerationResult:
    request = TextRequest(prompt=prompt, current_code=current_code, history=list(history))
    return await generate_openscad(request, context, settings)


async def generate_from_image(
    source: Union[bytes, str, Path],
    current_code: str,
    history: Sequence[ConversationTurn],
    context: SessionContext,
    mime_type: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> GenerationResult:
    image = await encode_image(source, mime_type)
    request = ImageRequest(image=image, current_code=current_code, history=list(history))
    return await generate_openscad(request, context, settings)
