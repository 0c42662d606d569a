from typing import List, Optional

from fastapi import APIRouter, File, Form, Header, HTTPException, UploadFile
from pydantic import TypeAdapter, ValidationError

from scad_backend.llm import GenerationFailure
from ...schemas.llm import ConversationTurn, GenerateRequest, GenerationResult, SessionContext
from ...services.llm_service import generate_from_image, generate_from_text


router = APIRouter(tags=["llm"], prefix="/llm")

_history_adapter = TypeAdapter(List[ConversationTurn])


def _session_context(api_key: Optional[str]) -> SessionContext:
    if not api_key or not api_key.strip():
        raise HTTPException(status_code=401, detail="X-Gemini-Api-Key header is required")
    return SessionContext(api_key=api_key.strip())


@router.post("/generate", response_model=GenerationResult)
async def generate_endpoint(
    payload: GenerateRequest,
    x_gemini_api_key: Optional[str] = Header(default=None),
) -> GenerationResult:
    context = _session_context(x_gemini_api_key)
    if not payload.prompt.strip():
        raise HTTPException(status_code=400, detail="prompt must not be empty")
    try:
        return await generate_from_text(payload.prompt, payload.current_code, payload.history, context)
    except GenerationFailure as exc:
        raise HTTPException(status_code=502, detail=exc.message)
    except Exception as exc:  # pragma: no cover - simple surface error mapping
        raise HTTPException(status_code=500, detail=f"Internal error: {exc}")


@router.post("/generate-from-image", response_model=GenerationResult)
async def generate_from_image_endpoint(
    image: UploadFile = File(...),
    current_code: str = Form(default=""),
    history: str = Form(default="[]"),
    x_gemini_api_key: Optional[str] = Header(default=None),
) -> GenerationResult:
    context = _session_context(x_gemini_api_key)
    try:
        turns = _history_adapter.validate_json(history)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=f"history is not a valid conversation: {exc}")

    data = await image.read()
    if not data:
        raise HTTPException(status_code=400, detail="image must not be empty")
    try:
        return await generate_from_image(data, current_code, turns, context, mime_type=image.content_type)
    except GenerationFailure as exc:
        raise HTTPException(status_code=502, detail=exc.message)
    except Exception as exc:  # pragma: no cover - simple surface error mapping
        raise HTTPException(status_code=500, detail=f"Internal error: {exc}")
