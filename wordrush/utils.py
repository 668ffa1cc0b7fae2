from __future__ import annotations
import re
from typing import Any

_NON_LETTERS = re.compile(r'[^a-z]')
_PLACEHOLDER = re.compile(r'\{(\w+)\}')


def sanitize_input(raw: Any, max_length: int = 20) -> str:
    if not isinstance(raw, str):
        return ''
    return _NON_LETTERS.sub('', raw.strip().lower())[:max_length]


def format_message(template: str, **values) -> str:
    # unknown placeholders are left as-is
    return _PLACEHOLDER.sub(lambda m: str(values[m.group(1)]) if m.group(1) in values else m.group(0), template)


def format_time(seconds: int) -> str:
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"
