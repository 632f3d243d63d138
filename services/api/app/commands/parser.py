from __future__ import annotations

import re
from collections.abc import Callable

from packages.shared.schemas.command import (
    AddTagCommandV1,
    CommandV1,
    LaunchWorkflowCommandV1,
    MarkNoShowCommandV1,
    MovePipelineCommandV1,
    SendFollowUpCommandV1,
)

# Identifiers are plain ASCII letters and digits. Anything with punctuation does not match.
_ID = r"([a-zA-Z0-9]+)"
# ASCII keeps case folding from matching letters like the Kelvin sign.
_FLAGS = re.IGNORECASE | re.ASCII

_FOLLOW_UP = re.compile(
    r"send(?:ing)?\s+(?:a\s+)?follow(?:-|\s)?up\s+(?:message\s+)?(?:to|for)?\s+(?:contact\s+)?"
    + _ID,
    _FLAGS,
)
_ADD_TAG = re.compile(
    r"(?:add|apply)\s+(?:the\s+)?tag\s+" + _ID + r"\s+(?:to|for)\s+(?:contact\s+)?" + _ID,
    _FLAGS,
)
_MOVE_PIPELINE = re.compile(
    r"move\s+(?:opportunity\s+)?" + _ID + r"\s+(?:to|into)\s+(?:stage|pipeline stage)\s+" + _ID,
    _FLAGS,
)
_LAUNCH_WORKFLOW = re.compile(
    r"launch\s+(?:workflow|campaign)\s+" + _ID + r"\s+for\s+(?:contact\s+)?" + _ID,
    _FLAGS,
)
_MARK_NOSHOW = re.compile(
    r"mark\s+(?:appointment\s+)?" + _ID + r"\s+(?:as\s+)?(?:a\s+)?no(?:-|\s)?show",
    _FLAGS,
)


def parse_command(text: str) -> CommandV1 | None:
    """Extract a command from free text (chat reply, transcript or typed input).

    Patterns are tried in a fixed order and the first match wins, so the more
    specific phrasings come first. Returns None when nothing matches.
    """

    if not text or not text.strip():
        return None

    for pattern, build in _GRAMMAR:
        m = pattern.search(text)
        if m:
            return build(m, text)

    return None


def _follow_up(m: re.Match[str], text: str) -> CommandV1:
    # The whole input is carried as the message body, not just the phrase after the id.
    return SendFollowUpCommandV1(contact_id=m.group(1), message=text)


def _add_tag(m: re.Match[str], text: str) -> CommandV1:
    del text
    return AddTagCommandV1(tag_id=m.group(1), contact_id=m.group(2))


def _move_pipeline(m: re.Match[str], text: str) -> CommandV1:
    del text
    return MovePipelineCommandV1(opportunity_id=m.group(1), stage_id=m.group(2))


def _launch_workflow(m: re.Match[str], text: str) -> CommandV1:
    del text
    return LaunchWorkflowCommandV1(workflow_id=m.group(1), contact_id=m.group(2))


def _mark_noshow(m: re.Match[str], text: str) -> CommandV1:
    del text
    return MarkNoShowCommandV1(appointment_id=m.group(1))


_GRAMMAR: list[tuple[re.Pattern[str], Callable[[re.Match[str], str], CommandV1]]] = [
    (_FOLLOW_UP, _follow_up),
    (_ADD_TAG, _add_tag),
    (_MOVE_PIPELINE, _move_pipeline),
    (_LAUNCH_WORKFLOW, _launch_workflow),
    (_MARK_NOSHOW, _mark_noshow),
]
