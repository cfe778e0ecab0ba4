"""Mention interpolation for notification templates.

Templates authored in the integration editor reference submitted fields in
two ways:

- brace tokens: ``{{ field_key }}`` (whitespace inside the braces is allowed)
- mention elements from the rich editor:
  ``<span mention mention-field-id="KEY" mention-fallback="TEXT">Label</span>``

A token is resolved against the field-value mapping by key first, then by
label (case-insensitive). Missing fields resolve to the mention's fallback
text, or to an empty string.
"""

from __future__ import annotations

import html
import re
from collections.abc import Mapping
from enum import Enum

from formnotify.schemas.notifications import FieldValue


class MentionMode(str, Enum):
    TEXT = "text"
    RICH = "rich"


# Match {{ field }} with optional whitespace.
_BRACE_TOKEN_RE = re.compile(r"{{\s*([^{}]+?)\s*}}")

# Match a <span ...mention...>...</span> element (attribute order can vary).
_MENTION_SPAN_RE = re.compile(
    r"<span\b(?P<attrs>[^>]*\bmention-field-id\s*=[^>]*)>.*?</span\s*>",
    flags=re.IGNORECASE | re.DOTALL,
)
_ATTR_RE = re.compile(r"""([\w-]+)\s*=\s*(?P<q>['"])(.*?)(?P=q)""", flags=re.DOTALL)


def _parse_attrs(raw: str) -> dict[str, str]:
    return {match.group(1).lower(): html.unescape(match.group(3)) for match in _ATTR_RE.finditer(raw)}


def _lookup(values: Mapping[str, FieldValue], name: str) -> FieldValue | None:
    found = values.get(name)
    if found is not None:
        return found
    wanted = name.strip().lower()
    for field in values.values():
        if field.label.strip().lower() == wanted:
            return field
    return None


def _render(field: FieldValue, mode: MentionMode) -> str:
    if mode is MentionMode.TEXT:
        return field.value
    if field.html is not None:
        return field.html
    if "\n" in field.value:
        return "<br>".join(field.value.splitlines())
    return field.value


def interpolate(
    template: str | None,
    values: Mapping[str, FieldValue],
    mode: MentionMode = MentionMode.TEXT,
) -> str:
    """Substitute every mention in ``template`` using ``values``."""
    if not template:
        return ""

    def replace_mention(match: re.Match) -> str:
        attrs = _parse_attrs(match.group("attrs"))
        field = _lookup(values, attrs.get("mention-field-id", ""))
        if field is None:
            return attrs.get("mention-fallback", "")
        return _render(field, mode)

    def replace_token(match: re.Match) -> str:
        field = _lookup(values, match.group(1))
        return _render(field, mode) if field is not None else ""

    # Mentions first so fallback text is never re-scanned for brace tokens.
    parts: list[str] = []
    last = 0
    for match in _MENTION_SPAN_RE.finditer(template):
        parts.append(_BRACE_TOKEN_RE.sub(replace_token, template[last:match.start()]))
        parts.append(replace_mention(match))
        last = match.end()
    parts.append(_BRACE_TOKEN_RE.sub(replace_token, template[last:]))
    return "".join(parts)


class MentionParser:
    """Resolve mentions in one template against one field-value mapping."""

    def __init__(self, template: str | None, values: Mapping[str, FieldValue] | None):
        self.template = template or ""
        self.values = values or {}

    def parse(self) -> str:
        """Rich output: link and multi-line values keep their markup."""
        return interpolate(self.template, self.values, MentionMode.RICH)

    def parse_as_text(self) -> str:
        """Plain output for subjects, sender names and addresses."""
        return interpolate(self.template, self.values, MentionMode.TEXT)
