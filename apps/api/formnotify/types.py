"""Shared type aliases for submission payloads and collaborator hooks."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from formnotify.schemas.notifications import FieldValue, FormRef

JsonValue: TypeAlias = object
RawSubmissionData: TypeAlias = Mapping[str, JsonValue]
FieldValueMapping: TypeAlias = "dict[str, FieldValue]"
HeaderList: TypeAlias = tuple[tuple[str, str], ...]

# Collaborator signatures injected into the composer
FieldFormatter: TypeAlias = "Callable[..., dict[str, FieldValue]]"
SubmissionIdEncoder: TypeAlias = Callable[[str], str]
EmailValidator: TypeAlias = Callable[[str], bool]
FileUrlBuilder: TypeAlias = "Callable[[FormRef, str], str]"
