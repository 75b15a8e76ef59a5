"""Text helpers shared by the transcript parsers."""

from __future__ import annotations

import re
from collections.abc import Iterable

_IDE_CONTEXT_TAG = re.compile(r"<ide_[^>]*>.*?</ide_[^>]*>", flags=re.DOTALL)
_SYSTEM_TAGS = tuple(
    re.compile(rf"<{name}[^>]*>.*?</{name}>", flags=re.DOTALL)
    for name in (
        "local-command-caveat",
        "system-reminder",
        "command-name",
        "command-message",
        "command-args",
        "local-command-stdout",
    )
)


def strip_ide_context_tags(text: str) -> str:
    """Remove IDE- and system-injected context tags from prompt text.

    IDE extensions prepend tags such as `<ide_opened_file>` or
    `<ide_selection>`, and the agent itself injects `<system-reminder>` and
    local command blocks. Each tag is removed together with its content, then
    the remaining text is trimmed.
    """

    result = _IDE_CONTEXT_TAG.sub("", text)
    for pattern in _SYSTEM_TAGS:
        result = pattern.sub("", result)
    return result.strip()


def deduplicate_strings(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
