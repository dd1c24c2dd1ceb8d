"""Process-wide settings, read once at startup.

Settings come from two JSON files under ``config/`` next to the package
(``models.json`` and ``dependencies.json``), then environment overrides.
The resulting `Settings` is immutable and is handed to constructors; nothing
downstream reads files or environment variables on its own.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
CONFIG_DIR = os.path.join(PROJECT_ROOT, "config")
MODELS_PATH = os.path.join(CONFIG_DIR, "models.json")
DEPENDENCIES_PATH = os.path.join(CONFIG_DIR, "dependencies.json")

# Page rasterization scale over the intrinsic page size. Higher values help
# OCR accuracy at the cost of memory and recognition time.
RENDER_SCALE = 2.0

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_BASE_URL = "https://api.openai.com/v1"


@dataclass(frozen=True)
class Settings:
    model: str = DEFAULT_MODEL
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    max_tokens: int = 1024
    temperature: float = 0.2
    request_timeout: float = 30.0
    max_attempts: int = 3
    backoff_seconds: float = 0.3
    render_scale: float = RENDER_SCALE
    ocr_language: str = "eng"
    ocr_mode: str = "raw"
    ocr_conf_threshold: int = 0
    ocr_workers: int = 1
    strict_pages: bool = False
    request_deadline: Optional[float] = None
    tesseract_cmd: Optional[str] = None
    poppler_path: Optional[str] = None

    def with_overrides(self, **changes: Any) -> "Settings":
        """Return a copy with the non-None values in `changes` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _resolve_path(base: str, relative: str) -> str:
    return os.path.abspath(os.path.join(base, relative))


def _read_json(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f) or {}


def read_dependency_paths(path: str = DEPENDENCIES_PATH, project_root: str = PROJECT_ROOT) -> Dict[str, str]:
    """Read Tesseract and Poppler locations from dependencies.json.

    Paths are relative to the project root. Entries pointing at something that
    does not exist are reported and skipped.
    """
    found: Dict[str, str] = {}
    if not os.path.exists(path):
        logger.debug("dependencies.json not found at %s", path)
        return found

    try:
        deps = _read_json(path)
    except (OSError, ValueError) as exc:
        logger.warning("Could not load dependencies from %s: %s", path, exc)
        return found

    tess_rel = deps.get("tesseract_path")
    if tess_rel:
        tess_abs = _resolve_path(project_root, tess_rel)
        if os.path.exists(tess_abs):
            found["tesseract_cmd"] = tess_abs
        else:
            logger.warning("Tesseract path from config does not exist: %s", tess_abs)

    poppler_rel = deps.get("poppler_path")
    if poppler_rel:
        candidate = _resolve_path(project_root, poppler_rel)
        if os.path.isdir(candidate):
            found["poppler_path"] = candidate
        else:
            logger.warning("Poppler path from config does not exist or is not a directory: %s", candidate)

    return found


def load_settings(
    models_path: str = MODELS_PATH,
    deps_path: str = DEPENDENCIES_PATH,
    env: Optional[Mapping[str, str]] = None,
    project_root: str = PROJECT_ROOT,
) -> Settings:
    """Build the immutable Settings for this process.

    A missing models.json is not an error: the API key may come from
    OPENAI_API_KEY. A present but invalid one raises ValueError.
    """
    from docsum.llm.client import get_picked_model

    env = os.environ if env is None else env
    values: Dict[str, Any] = {}

    if os.path.exists(models_path):
        model, api_key, base_url = get_picked_model(models_path)
        values.update(model=model, api_key=api_key)
        if base_url:
            values["base_url"] = base_url

    values.update(read_dependency_paths(deps_path, project_root=project_root))

    env_map = {
        "OPENAI_API_KEY": "api_key",
        "OPENAI_MODEL": "model",
        "OPENAI_BASE_URL": "base_url",
        "TESSERACT_CMD": "tesseract_cmd",
    }
    for key, field_name in env_map.items():
        if env.get(key):
            values[field_name] = env[key]

    poppler_env = env.get("POPPLER_PATH")
    if poppler_env and os.path.isdir(poppler_env):
        values["poppler_path"] = poppler_env

    return Settings(**values)
