from typing import Optional

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI, GoogleGenerativeAI
from loguru import logger

from scad_backend.app.config.settings import DEFAULT_GEMINI_MODEL
from scad_backend.app.schemas.llm import ImageAttachment


DEFAULT_MODEL = DEFAULT_GEMINI_MODEL


class GenerationFailure(RuntimeError):
    """Raised when the remote model could not produce a response."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _response_text(response) -> str:
    content = response.content if hasattr(response, "content") else response
    if isinstance(content, list):
        # Multimodal chat replies may come back as a list of parts
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text") or "")
        return "".join(parts)
    return content if isinstance(content, str) else str(content)


def generate_response(
    prompt: str,
    api_key: str,
    image: Optional[ImageAttachment] = None,
    model: str = DEFAULT_MODEL,
    temperature: float = 0.7,
) -> str:
    """Send one completion request to Gemini and return the raw text.

    Text prompts go through the plain completion model; prompts with an image
    attachment are sent as a single multimodal chat message.
    """
    key_to_use = (api_key or "").strip()
    if not key_to_use:
        raise GenerationFailure("Missing API key: a Gemini API key must be supplied with each request")

    logger.debug(f"Calling {model} (prompt={len(prompt)} chars, image={'yes' if image else 'no'})")

    if image is None:
        llm = GoogleGenerativeAI(
            model=model,
            google_api_key=key_to_use,
            temperature=temperature,
        )
        response = llm.invoke(prompt)
    else:
        llm = ChatGoogleGenerativeAI(
            model=model,
            google_api_key=key_to_use,
            temperature=temperature,
        )
        message = HumanMessage(
            content=[
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": image.to_data_uri()},
            ]
        )
        response = llm.invoke([message])

    return _response_text(response)
