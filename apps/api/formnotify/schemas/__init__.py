"""Pydantic schemas for notification inputs and results."""

from formnotify.schemas.notifications import (
    ComposedNotification,
    FieldValue,
    FormFieldRef,
    FormRef,
    IntegrationSettings,
    NotificationBodyData,
    SubmissionEvent,
    TransportProfile,
    WorkspaceMailSettings,
    WorkspaceRef,
)

__all__ = [
    "ComposedNotification",
    "FieldValue",
    "FormFieldRef",
    "FormRef",
    "IntegrationSettings",
    "NotificationBodyData",
    "SubmissionEvent",
    "TransportProfile",
    "WorkspaceMailSettings",
    "WorkspaceRef",
]
