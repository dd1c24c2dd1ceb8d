import json

import pytest

from docsum.config import RENDER_SCALE, Settings, load_settings, read_dependency_paths
from docsum.llm.client import get_picked_model


def _write_models(path, idx=0, **entry):
    item = {"provider": "openai", "model": "gpt-4o-mini", "api_key": "sk-file"}
    item.update(entry)
    path.write_text(json.dumps({"model_number_picked": idx, "models": [item]}), encoding="utf-8")
    return str(path)


def test_defaults_match_the_documented_policy():
    s = Settings()
    assert (s.model, s.max_tokens, s.temperature) == ("gpt-4o-mini", 1024, 0.2)
    assert (s.request_timeout, s.max_attempts, s.backoff_seconds) == (30.0, 3, 0.3)
    assert s.render_scale == RENDER_SCALE == 2.0
    assert s.ocr_language == "eng"


def test_settings_are_immutable():
    with pytest.raises(AttributeError):
        Settings().model = "other"


def test_with_overrides_ignores_none():
    s = Settings().with_overrides(ocr_workers=4, request_timeout=None)
    assert s.ocr_workers == 4
    assert s.request_timeout == 30.0


def test_get_picked_model_reads_selected_entry(tmp_path):
    path = _write_models(tmp_path / "models.json", base_url="https://openrouter.ai/api/v1")
    assert get_picked_model(path) == ("gpt-4o-mini", "sk-file", "https://openrouter.ai/api/v1")


def test_get_picked_model_rejects_bad_index(tmp_path):
    with pytest.raises(ValueError):
        get_picked_model(_write_models(tmp_path / "models.json", idx=3))


def test_get_picked_model_requires_key(tmp_path):
    with pytest.raises(ValueError):
        get_picked_model(_write_models(tmp_path / "models.json", api_key=""))


def test_load_settings_from_files_and_environment(tmp_path):
    models = _write_models(tmp_path / "models.json")
    (tmp_path / "poppler").mkdir()
    deps = tmp_path / "dependencies.json"
    deps.write_text(json.dumps({"poppler_path": "poppler", "tesseract_path": "missing/tesseract"}), encoding="utf-8")

    s = load_settings(models, str(deps), env={}, project_root=str(tmp_path))
    assert s.api_key == "sk-file"
    assert s.poppler_path == str(tmp_path / "poppler")
    assert s.tesseract_cmd is None

    s = load_settings(models, str(deps), env={"OPENAI_API_KEY": "sk-env", "OPENAI_MODEL": "gpt-4o"}, project_root=str(tmp_path))
    assert (s.api_key, s.model) == ("sk-env", "gpt-4o")


def test_load_settings_without_files_uses_environment(tmp_path):
    s = load_settings(str(tmp_path / "none.json"), str(tmp_path / "none2.json"), env={"OPENAI_API_KEY": "sk-env"})
    assert s.api_key == "sk-env"
    assert s.base_url == "https://api.openai.com/v1"


def test_broken_dependencies_file_is_ignored(tmp_path):
    deps = tmp_path / "dependencies.json"
    deps.write_text("{not json", encoding="utf-8")
    assert read_dependency_paths(str(deps), project_root=str(tmp_path)) == {}
