"""Service layer modules."""

from formnotify.services.mention_parser import MentionMode, MentionParser, interpolate
from formnotify.services.notification_composer import (
    NotificationComposer,
    NotificationCompositionError,
    compose_notification,
)
from formnotify.services.submission_formatter import (
    SubmissionFormatter,
    build_field_value_mapping,
)
from formnotify.services.transport_registry import TransportRegistry, transport_registry

# Import service modules (not individual functions) for cleaner access
from formnotify.services import signing_service  # noqa: F401

__all__ = [
    "MentionMode",
    "MentionParser",
    "NotificationComposer",
    "NotificationCompositionError",
    "SubmissionFormatter",
    "TransportRegistry",
    "build_field_value_mapping",
    "compose_notification",
    "interpolate",
    "signing_service",
    "transport_registry",
]
