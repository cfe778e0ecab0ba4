"""Form submission notification composer.

Resolves everything dynamic about a submission notification email (mailer,
sender, reply-to, subject, body content, anti-threading headers) and returns
a transport-agnostic ComposedNotification for the mail sender.
"""

from __future__ import annotations

import base64
import hashlib
import logging
import time
from functools import partial
from collections.abc import Callable

from formnotify.core.config import Settings, settings as default_settings
from formnotify.core.structured_logging import build_log_context
from formnotify.schemas.notifications import (
    ComposedNotification,
    FormRef,
    IntegrationSettings,
    NotificationBodyData,
    SubmissionEvent,
    TransportProfile,
)
from formnotify.services import signing_service
from formnotify.services.mention_parser import MentionParser
from formnotify.services.submission_formatter import build_field_value_mapping
from formnotify.services.transport_registry import TransportRegistry, transport_registry
from formnotify.types import (
    EmailValidator,
    FieldFormatter,
    FieldValueMapping,
    HeaderList,
    SubmissionIdEncoder,
)
from formnotify.utils.normalization import is_valid_email, single_line

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "New form submission"
UNKNOWN_SUBMISSION_ID = "unknown"


class NotificationCompositionError(ValueError):
    """Raised when the submission event is missing required upstream data."""


class NotificationComposer:
    """Compose one notification email for one submission event."""

    def __init__(
        self,
        event: SubmissionEvent,
        integration: IntegrationSettings | None = None,
        *,
        settings: Settings | None = None,
        field_formatter: FieldFormatter | None = None,
        encode_submission_id: SubmissionIdEncoder | None = None,
        email_validator: EmailValidator = is_valid_email,
        registry: TransportRegistry | None = None,
        clock: Callable[[], float] = time.time,
    ):
        if event is None or event.form is None:
            raise NotificationCompositionError(
                "Submission event has no form reference; cannot compose notification"
            )
        self.event = event
        self.form: FormRef = event.form
        self.integration = integration or IntegrationSettings()
        self.settings = settings or default_settings
        self.field_formatter = field_formatter or partial(build_field_value_mapping, settings=self.settings)
        self.encode_submission_id = encode_submission_id or partial(
            signing_service.encode_submission_id, settings=self.settings
        )
        self.email_validator = email_validator
        self.registry = registry if registry is not None else transport_registry
        self.clock = clock
        self._mappings: dict[tuple[bool, bool], FieldValueMapping] = {}

    # ------------------------------------------------------------------
    # Field values
    # ------------------------------------------------------------------

    def _field_values(self, create_links: bool = True) -> FieldValueMapping:
        include_hidden = bool(self.integration.include_hidden_fields_submission_data)
        cache_key = (create_links, include_hidden)
        if cache_key not in self._mappings:
            self._mappings[cache_key] = self.field_formatter(
                self.form,
                self.event.data,
                with_links=create_links,
                include_hidden=include_hidden,
            )
        return self._mappings[cache_key]

    # ------------------------------------------------------------------
    # Mailer / sender identity
    # ------------------------------------------------------------------

    def get_transport(self) -> TransportProfile | None:
        """Return the workspace SMTP profile when it may be used, else None."""
        workspace = self.form.workspace
        if not workspace.is_pro:
            return None
        email_settings = workspace.email_settings
        if email_settings is None or not email_settings.is_complete:
            if email_settings is not None:
                logger.debug(
                    "Incomplete workspace SMTP settings; using default mailer",
                    extra=self._log_context(),
                )
            return None
        return TransportProfile(
            mailer=self.settings.MAIL_CUSTOM_MAILER,
            host=str(email_settings.host),
            port=email_settings.port,
            username=str(email_settings.username),
            password=str(email_settings.password),
        )

    def select_mailer(self) -> tuple[str, TransportProfile | None]:
        """Return the mailer id and, for a custom mailer, its staged profile."""
        transport = self.get_transport()
        if transport is None:
            return self.settings.MAIL_MAILER, None
        return self.registry.stage(transport), transport

    def get_from_email(self) -> str:
        workspace = self.form.workspace
        email_settings = workspace.email_settings
        if workspace.is_pro and email_settings and email_settings.sender_address:
            return email_settings.sender_address

        sender_email = self.integration.sender_email
        if self.settings.SELF_HOSTED and sender_email and self.email_validator(sender_email):
            return sender_email

        base_email = self.settings.MAIL_FROM_ADDRESS
        if self.settings.SELF_HOSTED or "@" not in base_email:
            return base_email

        # local+<unix-timestamp>@domain, split on the first "@"
        local, domain = base_email.split("@", 1)
        return f"{local}+{int(self.clock())}@{domain}"

    def get_reply_to_email(self, default: str) -> str:
        reply_to = self.integration.reply_to
        if reply_to:
            parsed = MentionParser(reply_to, self._field_values(False)).parse_as_text().strip()
            if parsed and self.email_validator(parsed):
                return parsed
            logger.debug(
                "Reply-to template did not resolve to a valid address; using default",
                extra=self._log_context(),
            )
        return default

    def get_subject(self) -> str:
        template = self.integration.subject or DEFAULT_SUBJECT
        return single_line(MentionParser(template, self._field_values(False)).parse_as_text())

    def get_sender_name(self) -> str:
        template = self.integration.sender_name or self.settings.APP_NAME
        return single_line(MentionParser(template, self._field_values(False)).parse_as_text())

    def get_email_content(self) -> str:
        return MentionParser(self.integration.email_content or "", self._field_values()).parse()

    # ------------------------------------------------------------------
    # Anti-threading headers
    # ------------------------------------------------------------------

    def get_message_id(self) -> str:
        submission_id = self.event.submission_id or UNKNOWN_SUBMISSION_ID
        fingerprint = hashlib.md5(submission_id.encode("utf-8")).hexdigest()
        return f"<form-{self.form.id}-submission-{fingerprint}@{self.settings.mail_domain}>"

    def get_thread_index(self) -> str:
        submission_id = self.event.submission_id or UNKNOWN_SUBMISSION_ID
        digest = hashlib.md5(f"{self.form.id}{submission_id}".encode("utf-8")).digest()
        return base64.b64encode(digest).decode("ascii")

    def get_headers(self) -> HeaderList:
        """Headers that thread by submission, never by form. No timestamps."""
        message_id = self.get_message_id()
        return (
            ("X-Custom-Message-ID", message_id),
            ("Message-ID", message_id),
            ("References", message_id),
            ("Thread-Index", self.get_thread_index()),
        )

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def get_encoded_submission_id(self) -> str | None:
        submission_id = self.event.submission_id
        return self.encode_submission_id(submission_id) if submission_id else None

    def get_mail_data(self) -> NotificationBodyData:
        return NotificationBodyData(
            email_content=self.get_email_content(),
            fields=self._field_values(),
            form=self.form,
            integration_settings=self.integration,
            no_branding=self.form.no_branding,
            submission_id=self.get_encoded_submission_id(),
        )

    def compose(self, default_reply_to: str | None = None) -> ComposedNotification:
        # Senders must use result.transport; the registry entry is shared per mailer id.
        mailer_id, transport = self.select_mailer()
        notification = ComposedNotification(
            mailer_id=mailer_id,
            from_address=self.get_from_email(),
            reply_to=self.get_reply_to_email(default_reply_to or self.form.creator_email),
            subject=self.get_subject(),
            sender_name=self.get_sender_name(),
            headers=self.get_headers(),
            body_data=self.get_mail_data(),
            transport=transport,
        )
        logger.info(
            "Composed form notification via mailer %s",
            mailer_id,
            extra=self._log_context(mailer=mailer_id),
        )
        return notification

    def _log_context(self, mailer: str | None = None) -> dict:
        return build_log_context(
            form_id=self.form.id,
            workspace_id=self.form.workspace.id,
            submission_id=self.event.submission_id,
            mailer=mailer,
        )


def compose_notification(
    event: SubmissionEvent,
    integration: IntegrationSettings | None = None,
    *,
    default_reply_to: str | None = None,
    **options,
) -> ComposedNotification:
    """Compose the notification email for ``event`` with ``integration`` settings."""
    return NotificationComposer(event, integration, **options).compose(default_reply_to)
