"""Structured logging helpers (submission-data safe)."""

import logging
from typing import Any

from formnotify.core.config import settings


def build_log_context(
    *,
    form_id: str | int | None = None,
    workspace_id: str | int | None = None,
    submission_id: str | int | None = None,
    mailer: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict with identifiers only (never field values)."""
    context: dict[str, Any] = {}
    if form_id is not None:
        context["form_id"] = str(form_id)
    if workspace_id is not None:
        context["workspace_id"] = str(workspace_id)
    if submission_id is not None:
        context["submission_id"] = str(submission_id)
    if mailer:
        context["mailer"] = mailer
    return context


def configure_logging(level: str | None = None) -> None:
    """Fallback logging setup for hosts that don't configure handlers."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
