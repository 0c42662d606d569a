from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from scad_backend.app.config.settings import Settings, get_settings


def _get_log_path(settings: Optional[Settings] = None) -> Path:
    configured = (settings or get_settings()).LLM_LOG_PATH
    if configured:
        log_path = Path(configured)
    else:
        base_dir = Path(__file__).resolve().parents[2]  # points to scad_backend/
        log_path = base_dir / "tmp" / "llm_responses.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return log_path


def append_prompt_response(
    prompt: str,
    response: str,
    kind: str,
    model: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> None:
    """Append a prompt/response pair to a temp log file with a timestamp.

    This is intended for temporary logging during development.
    """
    timestamp = datetime.now(timezone.utc).isoformat()
    separator = "-" * 80

    log_path = _get_log_path(settings)
    with log_path.open("a", encoding="utf-8") as f:
        f.write(f"[{timestamp}] kind={kind} model={model or '-'}\n")
        f.write("PROMPT:\n")
        f.write(f"{prompt}\n\n")
        f.write("RESPONSE:\n")
        f.write(f"{response}\n")
        f.write(f"{separator}\n")
