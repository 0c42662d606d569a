from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .api.routes.llm import router as llm_router
from .config.settings import get_settings
from .utils.llm_logger import _get_log_path


settings = get_settings()

app = FastAPI(title=settings.APP_NAME)

# CORS for local frontend dev; adjust as needed for production
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(llm_router, prefix="/api")


@app.on_event("startup")
async def _clear_llm_responses_log() -> None:
    """Truncate the temporary LLM responses log on each service (re)start."""
    if not settings.LLM_LOG_ENABLED:
        return
    try:
        _get_log_path(settings).write_text("", encoding="utf-8")
    except OSError as exc:
        logger.warning(f"Could not reset LLM response log: {exc}")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("scad_backend.app.main:app", host="0.0.0.0", port=8000, reload=True)
