import os
from typing import Any, Dict, Optional

from huggingface_hub import InferenceClient

from mediscan.core.config import (
    HF_TEMPERATURE,
    HF_MAX_TOKENS,
    HF_TIMEOUT_S,
)
from mediscan.services.ollama_client import OllamaError, safe_json_parse

class HFLLMError(RuntimeError):
    pass

def hf_chat_json(
    *,
    model: str,
    system: str,
    user: str,
    schema: Optional[Dict[str, Any]] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    timeout_s: Optional[int] = None,
) -> Dict[str, Any]:
    # read token at runtime so a restarted config.env is picked up
    token = os.getenv("HF_TOKEN", "").strip()
    if not token:
        raise HFLLMError("HF_TOKEN is missing. Set it in config.env and restart.")

    provider = os.getenv("HF_PROVIDER", "auto").strip() or "auto"

    client = InferenceClient(
        provider=provider,
        api_key=token,
        timeout=float(timeout_s or HF_TIMEOUT_S),
    )

    messages = [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]

    if schema:
        response_format = {
            "type": "json_schema",
            "json_schema": {
                "name": "PrescriptionAnalysis",
                "schema": schema,
                "strict": True,
            },
        }
    else:
        response_format = {"type": "json_object"}

    try:
        out = client.chat_completion(
            model=model,
            messages=messages,
            temperature=temperature if temperature is not None else HF_TEMPERATURE,
            max_tokens=max_tokens if max_tokens is not None else HF_MAX_TOKENS,
            response_format=response_format,
        )
    except Exception as e:
        raise HFLLMError(f"HF inference failed: {e}") from e

    content = out.choices[0].message.content or ""
    try:
        return safe_json_parse(content)
    except OllamaError as e:
        raise HFLLMError(str(e)) from e
