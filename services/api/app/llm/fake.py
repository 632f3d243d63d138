from __future__ import annotations

import re

from services.api.app.commands.parser import parse_command

_GREETING = re.compile(r"\b(hello|hi|hey)\b")


class FakeLLMResponder:
    """Deterministic chat responder for tests and local dev.

    Messages that already read like a command are confirmed back verbatim so the
    command parser picks them up from the reply, the same way it would from a real
    model that was told to phrase actions in the command grammar.
    """

    def reply(self, *, message: str) -> str:
        text = (message or "").strip()
        low = text.lower()

        if parse_command(text) is not None:
            return f"Sure, I will {text[0].lower()}{text[1:]}"

        if _GREETING.search(low):
            return "Hello! How can I assist you today?"

        if "help" in low:
            return "I can help you with various tasks. Just let me know what you need!"

        if "bye" in low:
            return "Goodbye! Have a great day!"

        if "thank" in low:
            return "You're welcome! Is there anything else I can help you with?"

        return "I'm Jarvis, your digital assistant. How can I help you today?"
