"""
Test configuration and fixtures.

Provides:
- Isolated Settings instances (no .env reads)
- Form / workspace / submission builders
- A fresh transport registry per test
"""
from typing import Any

import pytest

from formnotify.core.config import Settings
from formnotify.schemas.notifications import (
    FormFieldRef,
    FormRef,
    IntegrationSettings,
    SubmissionEvent,
    WorkspaceMailSettings,
    WorkspaceRef,
)
from formnotify.services.transport_registry import TransportRegistry


FIXED_NOW = 1_700_000_000


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture
def app_settings() -> Settings:
    """Hosted (multi-tenant) deployment settings."""
    return Settings(
        _env_file=None,
        APP_NAME="FormNotify",
        APP_URL="https://example.com",
        SELF_HOSTED=False,
        MAIL_MAILER="smtp",
        MAIL_CUSTOM_MAILER="custom_smtp",
        MAIL_FROM_ADDRESS="hello@svc.test",
        SIGNING_SECRET="test-secret",
    )


@pytest.fixture
def self_hosted_settings() -> Settings:
    return Settings(
        _env_file=None,
        APP_NAME="FormNotify",
        APP_URL="https://forms.internal.example.org",
        SELF_HOSTED=True,
        MAIL_MAILER="smtp",
        MAIL_FROM_ADDRESS="hello@local.test",
        SIGNING_SECRET="test-secret",
    )


@pytest.fixture
def registry() -> TransportRegistry:
    return TransportRegistry()


# =============================================================================
# Builders
# =============================================================================

FULL_SMTP = WorkspaceMailSettings(
    host="smtp.acme.example.com",
    port=587,
    username="mailer",
    password="s3cret",
    sender_address="forms@acme.example.com",
)

DEFAULT_FIELDS = (
    FormFieldRef(key="name", label="Full Name", type="text"),
    FormFieldRef(key="email", label="Email", type="email"),
    FormFieldRef(key="message", label="Message", type="textarea"),
    FormFieldRef(key="website", label="Website", type="url"),
    FormFieldRef(key="resume", label="Resume", type="file"),
    FormFieldRef(key="utm_source", label="UTM Source", type="text", hidden=True),
)


def _make_form(
    *,
    form_id: int | str = 42,
    is_pro: bool = False,
    email_settings: WorkspaceMailSettings | None = None,
    fields: tuple[FormFieldRef, ...] = DEFAULT_FIELDS,
    no_branding: bool = False,
) -> FormRef:
    return FormRef(
        id=form_id,
        title="Contact",
        workspace=WorkspaceRef(id=7, is_pro=is_pro, email_settings=email_settings),
        creator_email="owner@example.com",
        no_branding=no_branding,
        fields=fields,
    )


def _make_event(form: FormRef | None = None, **data: Any) -> SubmissionEvent:
    payload: dict[str, Any] = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "submission_id": "abc123",
    }
    payload.update(data)
    return SubmissionEvent(form=form or _make_form(), data=payload)


@pytest.fixture
def make_form():
    return _make_form


@pytest.fixture
def make_event():
    return _make_event


@pytest.fixture
def form() -> FormRef:
    return _make_form()


@pytest.fixture
def event(form) -> SubmissionEvent:
    return _make_event(form)


@pytest.fixture
def integration() -> IntegrationSettings:
    return IntegrationSettings()


@pytest.fixture
def full_smtp() -> WorkspaceMailSettings:
    return FULL_SMTP


@pytest.fixture
def clock():
    return lambda: FIXED_NOW
