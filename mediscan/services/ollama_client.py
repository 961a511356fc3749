import json
from typing import Any, Dict, Optional

import requests

from mediscan.core.config import (
    OLLAMA_BASE_URL,
    OLLAMA_TEMPERATURE,
    OLLAMA_TIMEOUT_S,
)

class OllamaError(RuntimeError):
    pass

def _as_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None

def safe_json_parse(text: str) -> Dict[str, Any]:
    """
    The analysis reply as a JSON object. Tolerates markdown fences or chatter
    around the object; a bare list or scalar is rejected.
    """
    text = (text or "").strip()
    data = _as_object(text)
    if data is not None:
        return data

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        data = _as_object(text[start : end + 1])
        if data is not None:
            return data

    raise OllamaError(f"LLM reply is not a JSON object: {text[:200]}...")

def ollama_chat_json(
    model: str,
    system: str,
    user: str,
    schema: Optional[Dict[str, Any]] = None,
    temperature: Optional[float] = None,
    timeout_s: Optional[int] = None,
) -> Dict[str, Any]:
    """Single non-streaming /api/chat call, constrained by `format` when a schema is given."""
    payload: Dict[str, Any] = {
        "model": model,
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        "stream": False,
        "options": {"temperature": OLLAMA_TEMPERATURE if temperature is None else temperature},
    }
    if schema is not None:
        payload["format"] = schema

    try:
        r = requests.post(f"{OLLAMA_BASE_URL}/chat", json=payload, timeout=timeout_s or OLLAMA_TIMEOUT_S)
    except requests.RequestException as e:
        raise OllamaError(f"Ollama unreachable: {e}") from e
    if r.status_code >= 400:
        raise OllamaError(f"Ollama {r.status_code}: {r.text[:200]}")

    try:
        body = r.json()
    except ValueError as e:
        raise OllamaError("Ollama returned a non-JSON body") from e

    content = (body.get("message") or {}).get("content", "") if isinstance(body, dict) else ""
    return safe_json_parse(content)
