from __future__ import annotations

from pathlib import Path

import pytest

from scad_backend.app.schemas.llm import ImageRequest, SessionContext, TextRequest
from scad_backend.app.services import llm_service
from scad_backend.app.services.prompt_templates import IMAGE_FALLBACK_EXPLANATION
from scad_backend.app.utils.image_encoding import encode_image
from scad_backend.llm import GenerationFailure


class FakeModel:
    def __init__(self, response: str = '{"code": "cube(1);", "explanation": "a cube"}', error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls = []

    def __call__(self, prompt, api_key, image, model, temperature):
        self.calls.append({"prompt": prompt, "api_key": api_key, "image": image, "model": model})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_model(monkeypatch: pytest.MonkeyPatch) -> FakeModel:
    model = FakeModel()
    monkeypatch.setattr(llm_service, "generate_response", model)
    return model


@pytest.mark.asyncio
async def test_text_request_round_trip(fake_model, context, settings):
    result = await llm_service.generate_openscad(TextRequest(prompt="a cube"), context, settings)

    assert result.code == "cube(1);"
    assert result.explanation == "a cube"
    assert len(fake_model.calls) == 1
    call = fake_model.calls[0]
    assert call["api_key"] == "test-key"
    assert call["image"] is None
    assert call["model"] == settings.GEMINI_MODEL
    assert "User request: a cube" in call["prompt"]


@pytest.mark.asyncio
async def test_model_override_from_context(fake_model, settings):
    context = SessionContext(api_key="k", model="gemini-2.5-flash")
    await llm_service.generate_openscad(TextRequest(prompt="a cube"), context, settings)
    assert fake_model.calls[0]["model"] == "gemini-2.5-flash"


@pytest.mark.asyncio
async def test_image_request_passes_attachment(fake_model, context, settings):
    fake_model.response = "cylinder(h=3, r=1);"
    image = await encode_image(b"\x89PNG fake", "image/png")

    result = await llm_service.generate_openscad(ImageRequest(image=image), context, settings)

    assert fake_model.calls[0]["image"] == image
    assert result.code == "cylinder(h=3, r=1);"
    assert result.explanation == IMAGE_FALLBACK_EXPLANATION


@pytest.mark.asyncio
async def test_generate_from_image_reads_file(fake_model, context, settings, tmp_path: Path):
    path = tmp_path / "widget.jpg"
    path.write_bytes(b"jpeg bytes")

    await llm_service.generate_from_image(path, "", [], context, settings=settings)

    image = fake_model.calls[0]["image"]
    assert image.mime_type == "image/jpeg"


@pytest.mark.asyncio
async def test_generate_from_text_keeps_caller_history(fake_model, context, settings, long_history):
    before = list(long_history)
    await llm_service.generate_from_text("next", "cube(1);", long_history, context, settings)
    assert long_history == before


@pytest.mark.asyncio
async def test_transport_failure_propagates_without_recovery(fake_model, context, settings, monkeypatch):
    fake_model.error = ConnectionError("network unreachable")
    recovered = []
    monkeypatch.setattr(llm_service, "recover_response", lambda *args: recovered.append(args))

    with pytest.raises(GenerationFailure) as excinfo:
        await llm_service.generate_openscad(TextRequest(prompt="a cube"), context, settings)

    assert excinfo.value.message == "Failed to generate code: network unreachable"
    assert isinstance(excinfo.value.__cause__, ConnectionError)
    assert recovered == []
    assert len(fake_model.calls) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [AttributeError("'NoneType' object has no attribute 'content'"), TypeError("bad argument")])
async def test_internal_errors_are_not_wrapped(fake_model, context, settings, error):
    fake_model.error = error

    with pytest.raises(type(error)) as excinfo:
        await llm_service.generate_openscad(TextRequest(prompt="a cube"), context, settings)

    assert not isinstance(excinfo.value, GenerationFailure)


@pytest.mark.asyncio
async def test_image_failure_prefix(fake_model, context, settings):
    fake_model.error = TimeoutError("deadline exceeded")
    image = await encode_image(b"img", "image/png")

    with pytest.raises(GenerationFailure, match=r"^Failed to process image: deadline exceeded$"):
        await llm_service.generate_openscad(ImageRequest(image=image), context, settings)


@pytest.mark.asyncio
async def test_blank_api_key_fails_before_network(settings):
    with pytest.raises(GenerationFailure) as excinfo:
        await llm_service.generate_openscad(TextRequest(prompt="a cube"), SessionContext(api_key="  "), settings)
    assert excinfo.value.message.startswith("Failed to generate code: Missing API key")


@pytest.mark.asyncio
async def test_prompt_and_response_are_journaled(fake_model, context, settings):
    await llm_service.generate_openscad(TextRequest(prompt="a journaled cube"), context, settings)

    journal = Path(settings.LLM_LOG_PATH).read_text(encoding="utf-8")
    assert "kind=text" in journal
    assert "User request: a journaled cube" in journal
    assert '"explanation": "a cube"' in journal


@pytest.mark.asyncio
async def test_journal_can_be_disabled(fake_model, context, settings):
    settings.LLM_LOG_ENABLED = False
    await llm_service.generate_openscad(TextRequest(prompt="a cube"), context, settings)
    assert not Path(settings.LLM_LOG_PATH).exists()
