from __future__ import annotations

import json
import os
import urllib.error
import urllib.request

DEFAULT_MODEL = "gpt-4o-mini"


class OpenAIResponder:
    """Chat replies via OpenAI.

    The system prompt asks the model to phrase any CRM action in the command grammar,
    so the reply can be fed straight into the command parser. Every failure to get a
    reply surfaces as RuntimeError.
    """

    def __init__(
        self, *, api_key: str, model: str = DEFAULT_MODEL, timeout_seconds: float = 45.0
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout_seconds

    @classmethod
    def from_env(cls) -> OpenAIResponder:
        api_key = os.getenv("OPENAI_API_KEY", "").strip()
        if not api_key:
            raise ValueError("OPENAI_API_KEY is required when JARVIS_LLM_PROVIDER=openai")

        return cls(
            api_key=api_key,
            model=os.getenv("JARVIS_LLM_MODEL", DEFAULT_MODEL).strip() or DEFAULT_MODEL,
            timeout_seconds=float(os.getenv("JARVIS_LLM_TIMEOUT_SECONDS", "45")),
        )

    def reply(self, *, message: str) -> str:
        return _openai_chat(
            api_key=self._api_key,
            model=self._model,
            system_prompt=_SYSTEM_PROMPT,
            user_message=message,
            timeout_seconds=self._timeout,
        )


def _openai_chat(
    *,
    api_key: str,
    model: str,
    system_prompt: str,
    user_message: str,
    timeout_seconds: float,
) -> str:
    url = "https://api.openai.com/v1/chat/completions"

    body = {
        "model": model,
        "temperature": 0.2,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_message},
        ],
    }

    req = urllib.request.Request(url, method="POST")
    req.add_header("Authorization", f"Bearer {api_key}")
    req.add_header("Content-Type", "application/json")

    data = json.dumps(body).encode("utf-8")
    try:
        with urllib.request.urlopen(req, data=data, timeout=timeout_seconds) as resp:
            payload = json.loads(resp.read().decode("utf-8"))
    except urllib.error.HTTPError as e:
        raw = e.read().decode("utf-8", errors="replace")
        raise RuntimeError(f"OpenAI HTTP {e.code}: {raw}") from e
    except (urllib.error.URLError, TimeoutError) as e:
        raise RuntimeError(f"OpenAI unreachable: {e}") from e

    try:
        return payload["choices"][0]["message"]["content"]
    except Exception as e:
        raise RuntimeError(f"Unexpected OpenAI response shape: {payload!r}") from e


_SYSTEM_PROMPT = """You are Jarvis, a concise assistant for a sales team's CRM (GoHighLevel).

When the user asks you to perform a CRM action, confirm it in ONE sentence using exactly
one of these phrasings, with identifiers made of letters and digits only:

- "Sending a follow-up to contact <contactId>"
- "Add the tag <tagId> to contact <contactId>"
- "Move opportunity <opportunityId> to stage <stageId>"
- "Launch workflow <workflowId> for contact <contactId>"
- "Mark appointment <appointmentId> as no-show"

Rules:
- Use at most one action phrase per reply.
- If an identifier is missing, ask for it instead of inventing one.
- For anything else, answer briefly and do not use the phrasings above.
"""
