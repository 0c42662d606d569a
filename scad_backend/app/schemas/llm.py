from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class ConversationTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    code: Optional[str] = None  # code snapshot attached to an assistant turn


class ImageAttachment(BaseModel):
    data: str  # base64, no data-URI prefix
    mime_type: str

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class TextRequest(BaseModel):
    kind: Literal["text"] = "text"
    prompt: str
    current_code: str = ""
    history: List[ConversationTurn] = Field(default_factory=list)


class ImageRequest(BaseModel):
    kind: Literal["image"] = "image"
    image: ImageAttachment
    current_code: str = ""
    history: List[ConversationTurn] = Field(default_factory=list)


GenerationRequest = Annotated[Union[TextRequest, ImageRequest], Field(discriminator="kind")]


class GenerationResult(BaseModel):
    code: str
    explanation: str


class SessionContext(BaseModel):
    # Owned by the caller and passed into every call; never stored
    api_key: str
    model: Optional[str] = None


class GenerateRequest(BaseModel):
    prompt: str
    current_code: str = ""
    history: List[ConversationTurn] = Field(default_factory=list)


def append_exchange(history: List[ConversationTurn], request_text: str, result: GenerationResult) -> List[ConversationTurn]:
    """Return a new history with the user request and the assistant reply appended.

    The assistant turn carries the explanation as its content and the generated
    code as its snapshot. ``history`` itself is left untouched.
    """
    return [
        *history,
        ConversationTurn(role="user", content=request_text),
        ConversationTurn(role="assistant", content=result.explanation, code=result.code),
    ]
