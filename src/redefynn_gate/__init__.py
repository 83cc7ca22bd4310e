"""Redefynn security gate library."""

from .config import GateConfig, InputLimits
from .csp import build_csp_header, csp_header_name, generate_nonce, parse_csp_report
from .events import (
    BufferedSecurityEventSink,
    SecurityEventLogger,
    SecurityEventSink,
    SecurityEventType,
    StructlogSecurityEventSink,
)
from .exceptions import (
    AuthBackendError,
    AuthenticationRequired,
    BackendError,
    ConfigError,
    ConfigErrorCodes,
    GateError,
    GateErrorCodes,
    RateLimited,
    ValidationFailed,
)
from .gate import SecurityGate
from .loader import deep_merge, load_config, validate_environment
from .logger import configure_logging, new_logger
from .models import (
    ApplicationInput,
    ApplicationRecord,
    ApplicationStats,
    AuthResponse,
    AuthSession,
    GateResult,
    Notification,
    NotificationVariant,
    Profile,
    RateLimitEntry,
    RateLimitPolicy,
    SecurityEvent,
    User,
    ValidationResult,
)
from .notifications import InMemoryNotificationSink, LoggingNotificationSink, NotificationSink
from .ratelimit import RateLimiter
from .redaction import get_secure_error_message
from .sanitizer import sanitize_application, sanitize_input
from .session import SecurityStatus, SessionMonitor
from .tokens import ResetTokens, parse_reset_link
from .validation import (
    validate_application_data,
    validate_email,
    validate_password,
    validate_password_confirmation,
)

__all__ = [
    "ApplicationInput",
    "ApplicationRecord",
    "ApplicationStats",
    "AuthBackendError",
    "AuthResponse",
    "AuthSession",
    "AuthenticationRequired",
    "BackendError",
    "BufferedSecurityEventSink",
    "ConfigError",
    "ConfigErrorCodes",
    "GateConfig",
    "GateError",
    "GateErrorCodes",
    "GateResult",
    "InMemoryNotificationSink",
    "InputLimits",
    "LoggingNotificationSink",
    "Notification",
    "NotificationSink",
    "NotificationVariant",
    "Profile",
    "RateLimitEntry",
    "RateLimitPolicy",
    "RateLimited",
    "RateLimiter",
    "ResetTokens",
    "SecurityEvent",
    "SecurityEventLogger",
    "SecurityEventSink",
    "SecurityEventType",
    "SecurityGate",
    "SecurityStatus",
    "SessionMonitor",
    "StructlogSecurityEventSink",
    "User",
    "ValidationFailed",
    "ValidationResult",
    "build_csp_header",
    "configure_logging",
    "csp_header_name",
    "deep_merge",
    "generate_nonce",
    "get_secure_error_message",
    "load_config",
    "new_logger",
    "parse_csp_report",
    "parse_reset_link",
    "sanitize_application",
    "sanitize_input",
    "validate_application_data",
    "validate_email",
    "validate_password",
    "validate_password_confirmation",
]
