"""Client utilities for talking to an OpenAI-compatible chat-completions API.

This module contains model selection from the JSON configuration and thin
helpers to create a client and perform a single chat completion.
"""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Tuple

from openai import OpenAI

from docsum.errors import MalformedCompletion


def _load_config(path: str) -> Dict:
    """Load and return the JSON configuration.

    Doxygen:
    - @param path: Absolute path to the JSON configuration file.
    - @return: Parsed configuration dictionary.
    - @throws FileNotFoundError: If the file is missing.
    - @throws json.JSONDecodeError: If the file content is not valid JSON.
    """
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def get_picked_model(path: str) -> Tuple[str, str, Optional[str]]:
    """Return the selected model id, its API key and optional base URL.

    The configuration file must contain the following structure:
    - model_number_picked: integer index into the "models" array
    - models: list of items with fields:
      - provider: string (e.g., "openai")
      - model: string (e.g., "gpt-4o-mini")
      - api_key: string
      - base_url: optional string

    Doxygen:
    - @param path: Absolute path to the JSON configuration file.
    - @return: (model, api_key, base_url) triple.
    - @throws ValueError: If index is invalid or fields are missing.
    """
    cfg = _load_config(path)
    models: List[Dict] = cfg.get("models", [])
    idx = cfg.get("model_number_picked")

    if not isinstance(idx, int) or isinstance(idx, bool):
        raise ValueError("Config must include integer 'model_number_picked'.")
    if idx < 0 or idx >= len(models):
        raise ValueError("'model_number_picked' is out of range for available models.")

    item = models[idx]
    model = item.get("model")
    api_key = item.get("api_key")
    if not model or not api_key:
        raise ValueError("Selected model entry must include both 'model' and 'api_key'.")
    return model, api_key, item.get("base_url")


def get_client(api_key: str, base_url: str) -> OpenAI:
    """Create an OpenAI client with SDK-level retries disabled.

    Retries are owned by `SummarizationClient`, so the SDK must not add its own.

    Doxygen:
    - @param api_key: Bearer token for the provider.
    - @param base_url: API root, e.g. "https://api.openai.com/v1".
    - @return: Configured `OpenAI` client instance.
    """
    return OpenAI(
        base_url=base_url,
        api_key=api_key,
        max_retries=0,
    )


def chat_completion(
    client: OpenAI,
    model: str,
    messages: List[Dict[str, str]],
    timeout: float | None = 30.0,
    max_tokens: int | None = None,
    temperature: float | None = None,
) -> str:
    """Send a chat completion request and return text content.

    Doxygen:
    - @param client: OpenAI instance created by `get_client`.
    - @param model: Target model identifier.
    - @param messages: List of role/content dictionaries for the chat.
    - @param timeout: Request timeout in seconds; None disables timeout.
    - @param max_tokens: Upper bound on generated tokens; None leaves the provider default.
    - @param temperature: Sampling temperature; None leaves the provider default.
    - @return: Text content of the first completion choice ("" when absent).
    - @throws MalformedCompletion: If the response has no choices or the first has no message.
    """
    params = {}
    if max_tokens is not None:
        params["max_tokens"] = max_tokens
    if temperature is not None:
        params["temperature"] = temperature
    completion = client.chat.completions.create(
        model=model,
        messages=messages,
        timeout=timeout,
        **params,
    )
    choices = getattr(completion, "choices", None)
    if not choices:
        raise MalformedCompletion("Completion response contained no choices.")
    message = getattr(choices[0], "message", None)
    if message is None:
        raise MalformedCompletion("First completion choice has no message.")
    return message.content or ""


def check_model_health(client: OpenAI, model: str, timeout: float | None = 10.0) -> None:
    """Perform a lightweight health check request.

    Doxygen:
    - @param client: OpenAI instance.
    - @param model: Model identifier.
    - @param timeout: Request timeout in seconds.
    - @throws RuntimeError: If the request fails.
    """
    try:
        _ = chat_completion(client, model, messages=[{"role": "user", "content": "ping"}], timeout=timeout, max_tokens=1)
    except Exception as e:
        raise RuntimeError(f"Model health check failed: {e}") from e
