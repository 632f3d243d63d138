from __future__ import annotations

from typing import Protocol


class LLMResponder(Protocol):
    def reply(self, *, message: str) -> str: ...
