"""Submission formatter: raw submission data -> display-ready field values."""

from __future__ import annotations

import html
from typing import Any

from formnotify.core.config import Settings
from formnotify.schemas.notifications import FieldValue, FormFieldRef, FormRef
from formnotify.services import signing_service
from formnotify.types import FieldValueMapping, FileUrlBuilder, RawSubmissionData


def _signed_file_url(settings: Settings | None) -> FileUrlBuilder:
    def build(form: FormRef, filename: str) -> str:
        return signing_service.build_signed_file_url(form.id, filename, settings=settings)

    return build


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple, set)):
        return [item for item in value if not _is_empty(item)]
    return [value]


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, dict):
        return ", ".join(f"{k}: {_to_text(v)}" for k, v in value.items() if not _is_empty(v))
    if isinstance(value, (list, tuple, set)):
        return ", ".join(_to_text(item) for item in _as_list(value))
    return str(value)


def _link(href: str, text: str) -> str:
    return (
        f'<a href="{html.escape(href, quote=True)}" target="_blank" rel="noopener noreferrer">'
        f"{html.escape(text)}</a>"
    )


class SubmissionFormatter:
    """
    Project a submission onto its form's fields.

    Plain output by default; ``create_links()`` adds HTML renderings for
    files, urls and emails, ``show_hidden_fields()`` includes hidden fields.
    """

    def __init__(
        self,
        form: FormRef,
        data: RawSubmissionData,
        *,
        file_url: FileUrlBuilder | None = None,
        settings: Settings | None = None,
    ):
        self.form = form
        self.data = data or {}
        self.file_url = file_url or _signed_file_url(settings)
        self._create_links = False
        self._show_hidden = False

    def create_links(self) -> "SubmissionFormatter":
        self._create_links = True
        return self

    def show_hidden_fields(self) -> "SubmissionFormatter":
        self._show_hidden = True
        return self

    def get_fields_with_value(self) -> FieldValueMapping:
        """Return key -> FieldValue for every visible field with a value."""
        fields: FieldValueMapping = {}
        for field in self.form.fields:
            if field.hidden and not self._show_hidden:
                continue
            raw = self.data.get(field.key)
            if _is_empty(raw):
                continue
            fields[field.key] = self._format_field(field, raw)
        return fields

    def _format_field(self, field: FormFieldRef, raw: Any) -> FieldValue:
        if field.type in ("file", "signature"):
            return self._format_files(field, raw)

        text = _to_text(raw)
        rich: str | None = None
        if self._create_links and field.type == "url":
            rich = _link(text, text)
        elif self._create_links and field.type == "email":
            rich = _link(f"mailto:{text}", text)
        elif "\n" in text:
            rich = "<br>".join(html.escape(line) for line in text.splitlines())

        return FieldValue(key=field.key, label=field.label, type=field.type, value=text, html=rich)

    def _format_files(self, field: FormFieldRef, raw: Any) -> FieldValue:
        filenames = [str(name) for name in _as_list(raw)]
        urls = [self.file_url(self.form, name) for name in filenames]
        rich = None
        if self._create_links:
            rich = "<br>".join(_link(url, name) for url, name in zip(urls, filenames))
        return FieldValue(
            key=field.key,
            label=field.label,
            type=field.type,
            value=", ".join(urls),
            html=rich,
        )


def build_field_value_mapping(
    form: FormRef,
    data: RawSubmissionData,
    *,
    with_links: bool,
    include_hidden: bool,
    settings: Settings | None = None,
) -> FieldValueMapping:
    """String-only projection of submission fields for templating."""
    formatter = SubmissionFormatter(form, data, settings=settings)
    if with_links:
        formatter.create_links()
    if include_hidden:
        formatter.show_hidden_fields()
    return formatter.get_fields_with_value()
