"""Pydantic schemas for form notification composition."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from formnotify.types import JsonValue


FieldType = Literal[
    "text",
    "textarea",
    "email",
    "phone",
    "url",
    "number",
    "date",
    "select",
    "multiselect",
    "radio",
    "checkbox",
    "file",
    "signature",
]


# =============================================================================
# Workspace / Form references
# =============================================================================

class WorkspaceMailSettings(BaseModel):
    """Custom SMTP settings attached to a workspace (paid tier only)."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    host: str | None = None
    port: int | str | None = None
    username: str | None = None
    password: str | None = None
    sender_address: str | None = None

    @property
    def is_complete(self) -> bool:
        """All four transport fields must be non-empty; blank strings do not count."""
        values = (self.host, self.port, self.username, self.password)
        return all(
            (value.strip() if isinstance(value, str) else value) not in (None, "", 0)
            for value in values
        )


class WorkspaceRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | str
    is_pro: bool = False
    email_settings: WorkspaceMailSettings | None = None


class FormFieldRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1, max_length=100)
    label: str = Field(..., min_length=1, max_length=200)
    type: FieldType = "text"
    hidden: bool = False


class FormRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | str
    title: str = ""
    workspace: WorkspaceRef
    creator_email: str
    no_branding: bool = False
    fields: tuple[FormFieldRef, ...] = ()


# =============================================================================
# Inputs
# =============================================================================

class IntegrationSettings(BaseModel):
    """Per-notification settings authored in the email integration."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    sender_name: str | None = None
    sender_email: str | None = None
    reply_to: str | None = None
    subject: str | None = None
    email_content: str | None = None
    include_hidden_fields_submission_data: bool = False


class SubmissionEvent(BaseModel):
    """A form submission; ``data`` carries the reserved ``submission_id`` key."""
    model_config = ConfigDict(frozen=True)

    form: FormRef | None = None
    data: dict[str, JsonValue] = Field(default_factory=dict)

    @property
    def submission_id(self) -> str | None:
        raw = self.data.get("submission_id")
        if raw is None or raw == "":
            return None
        return str(raw)


# =============================================================================
# Field values
# =============================================================================

class FieldValue(BaseModel):
    """Display-ready projection of one submitted field."""
    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    type: FieldType = "text"
    value: str = ""
    html: str | None = None  # Rich rendering (links, line breaks)


# =============================================================================
# Output
# =============================================================================

class TransportProfile(BaseModel):
    """Custom transport values staged under a mailer id."""
    model_config = ConfigDict(frozen=True)

    mailer: str
    host: str
    port: int | str
    username: str
    password: str = Field(..., repr=False)


class NotificationBodyData(BaseModel):
    """Data handed to the body template renderer."""
    model_config = ConfigDict(frozen=True)

    email_content: str = ""
    fields: dict[str, FieldValue] = Field(default_factory=dict)
    form: FormRef
    integration_settings: IntegrationSettings
    no_branding: bool = False
    submission_id: str | None = None  # Encoded, externally-visible id


class ComposedNotification(BaseModel):
    """Transport-agnostic result of one composition."""
    model_config = ConfigDict(frozen=True)

    mailer_id: str
    from_address: str
    reply_to: str
    subject: str
    sender_name: str
    headers: tuple[tuple[str, str], ...] = ()
    body_data: NotificationBodyData
    transport: TransportProfile | None = None

    def header(self, name: str) -> str | None:
        """Return the first header value with ``name`` (case-insensitive)."""
        wanted = name.lower()
        for header_name, value in self.headers:
            if header_name.lower() == wanted:
                return value
        return None
