"""Security gate in front of the auth and persistence backends."""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from typing import Any

import jwt
import structlog

from .backend.client import AuthClient, PersistenceClient
from .backend.http_client import SupabaseAuthClient, SupabasePersistenceClient
from .config import GateConfig, RateLimitSection
from .csp import parse_csp_report
from .events import SecurityEventLogger, SecurityEventType, StructlogSecurityEventSink
from .exceptions import (
    AuthenticationRequired,
    BackendError,
    GateError,
    RateLimited,
    ValidationFailed,
)
from .logger import configure_logging
from .models import (
    APPLICATION_STATUS_SUBMITTED,
    ApplicationInput,
    ApplicationRecord,
    ApplicationStats,
    AuthResponse,
    GateResult,
    Profile,
    User,
    ValidationResult,
)
from .notifications import LoggingNotificationSink, NotificationSink
from .ratelimit import RateLimiter
from .redaction import get_secure_error_message
from .sanitizer import sanitize_application
from .session import SessionMonitor
from .tokens import parse_reset_link, read_unverified_claims
from .validation import (
    validate_application_data,
    validate_email,
    validate_password,
    validate_password_confirmation,
)

logger = structlog.get_logger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class SecurityGate:
    """Validates, sanitizes and rate-limits every write before delegating it.

    Each public operation returns a ``GateResult``; nothing raises past it.
    Raw backend errors go to the security event log only; the caller and
    the notification sink see the redacted message.
    """

    def __init__(
        self,
        auth: AuthClient,
        persistence: PersistenceClient,
        config: GateConfig | None = None,
        rate_limiter: RateLimiter | None = None,
        events: SecurityEventLogger | None = None,
        notifier: NotificationSink | None = None,
        session_monitor: SessionMonitor | None = None,
    ) -> None:
        self._config = config or GateConfig()
        self._auth = auth
        self._persistence = persistence
        self._limiter = rate_limiter or RateLimiter()
        self._events = events or SecurityEventLogger(
            enabled=self._config.features.security_logging
        )
        self._notifier = notifier or LoggingNotificationSink()
        self._session_monitor = session_monitor

    @classmethod
    def from_config(
        cls,
        config: GateConfig,
        notifier: NotificationSink | None = None,
        on_session_timeout: Callable[[], None] | None = None,
    ) -> SecurityGate:
        """Build a gate wired to the Supabase backends named in ``config``.

        Configures logging from ``config.log`` and writes security events
        to structlog.
        """
        configure_logging(config)
        auth = SupabaseAuthClient(config.backend)
        events = SecurityEventLogger(
            sink=StructlogSecurityEventSink(), enabled=config.features.security_logging
        )
        return cls(
            auth=auth,
            persistence=SupabasePersistenceClient(config.backend, auth=auth),
            config=config,
            events=events,
            notifier=notifier,
            session_monitor=SessionMonitor(config.session, events, on_timeout=on_session_timeout),
        )

    @property
    def config(self) -> GateConfig:
        return self._config

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._limiter

    def start(self) -> None:
        if self._session_monitor is not None:
            self._session_monitor.start()

    async def stop(self) -> None:
        if self._session_monitor is not None:
            await self._session_monitor.stop()

    # -- helpers ---------------------------------------------------------

    def _validated(self, action: str, *results: Any, **details: Any) -> None:
        errors = [e for r in results for e in r.errors]
        if errors:
            self._events.log(
                SecurityEventType.VALIDATION_ERROR,
                {"action": action, "errors": errors, **details},
            )
            raise ValidationFailed(errors)

    def _enforce_rate_limit(
        self, action: str, key: str, policy: RateLimitSection, **details: Any
    ) -> None:
        if not self._config.features.rate_limiting_enabled:
            return
        if self._limiter.check(key, policy.to_policy()):
            return
        remaining = self._limiter.get_remaining_time(key)
        minutes = math.ceil(remaining / 60)
        self._events.log(
            SecurityEventType.RATE_LIMIT_EXCEEDED,
            {"action": action, "key": key, "remaining_secs": remaining, **details},
        )
        raise RateLimited(minutes)

    def _enforce_read_limit(self, action: str, user: User) -> None:
        # all reads by one user share the general budget
        self._enforce_rate_limit(
            action, f"general_{user.id}", self._config.rate_limits.general, user_id=user.id
        )

    def _backend_failure(
        self,
        event_name: str,
        action: str,
        error: Exception,
        **details: Any,
    ) -> BackendError:
        raw = error.message if isinstance(error, GateError) else str(error)
        self._events.log(event_name, {"action": action, "error": raw, **details})
        logger.warning("backend call failed", action=action, error_type=type(error).__name__)
        return BackendError(
            get_secure_error_message(error, self._config.error_messages),
            cause=error,
            status=getattr(error, "status", None),
        )

    def _fail(self, error: GateError, title: str | None) -> GateResult[Any]:
        if title is not None:
            self._notifier.failure(title, error.message)
        return GateResult(error=error)

    async def _current_user(self) -> User | None:
        try:
            session = await self._auth.get_session()
        except Exception as e:
            raise self._backend_failure(
                SecurityEventType.INVALID_SESSION, "get_session", e
            ) from e
        return session.user if session is not None else None

    async def _require_user(self, action: str) -> User:
        user = await self._current_user()
        if user is None:
            self._events.log(SecurityEventType.UNAUTHORIZED_ACCESS, {"action": action})
            raise AuthenticationRequired()
        return user

    # -- auth ------------------------------------------------------------

    async def sign_up(
        self, email: str, password: str, redirect_to: str | None = None
    ) -> GateResult[AuthResponse]:
        try:
            self._validated("sign_up", validate_email(email, self._config.input_limits))
            self._validated("sign_up", validate_password(password, self._config.input_limits))
            normalized = _normalize_email(email)
            self._enforce_rate_limit(
                "sign_up", f"signup_{normalized}", self._config.rate_limits.sign_up, email=normalized
            )
            try:
                resp = await self._auth.sign_up(email.strip(), password, redirect_to)
            except Exception as e:
                raise self._backend_failure(
                    SecurityEventType.AUTH_FAILED, "sign_up", e, email=normalized
                ) from e
        except GateError as e:
            return self._fail(e, "Sign up failed")

        self._events.log(
            SecurityEventType.USER_SIGNUP,
            {"user_id": resp.user.id if resp.user else None, "email": normalized},
        )
        if resp.user is not None and not resp.user.email_confirmed_at:
            self._notifier.success(
                "Check your email",
                "We've sent you a confirmation link to complete your registration.",
            )
        return GateResult(data=resp)

    async def sign_in(self, email: str, password: str) -> GateResult[AuthResponse]:
        try:
            self._validated("sign_in", validate_email(email, self._config.input_limits))
            self._validated("sign_in", validate_password(password, self._config.input_limits))
            normalized = _normalize_email(email)
            self._enforce_rate_limit(
                "sign_in", f"signin_{normalized}", self._config.rate_limits.sign_in, email=normalized
            )
            try:
                resp = await self._auth.sign_in_with_password(email.strip(), password)
            except Exception as e:
                raise self._backend_failure(
                    SecurityEventType.AUTH_FAILED, "sign_in", e, email=normalized
                ) from e
        except GateError as e:
            return self._fail(e, "Sign in failed")

        self._events.log(
            SecurityEventType.USER_SIGNIN,
            {"user_id": resp.user.id if resp.user else None, "email": normalized},
        )
        if self._session_monitor is not None:
            self._session_monitor.record_activity()
        self._notifier.success("Welcome back!", "You've successfully signed in to Redefynn.")
        return GateResult(data=resp)

    async def sign_out(self) -> GateResult[None]:
        try:
            user = await self._current_user()
            try:
                await self._auth.sign_out()
            except Exception as e:
                raise self._backend_failure(
                    SecurityEventType.AUTH_FAILED, "sign_out", e
                ) from e
        except GateError as e:
            return self._fail(e, "Sign out failed")

        self._events.log(
            SecurityEventType.USER_SIGNOUT, {"user_id": user.id if user else None}
        )
        self._notifier.success("Signed out", "You've been successfully signed out.")
        return GateResult()

    async def request_password_reset(
        self, email: str, redirect_to: str | None = None
    ) -> GateResult[None]:
        try:
            self._validated(
                "password_reset", validate_email(email, self._config.input_limits)
            )
            normalized = _normalize_email(email)
            self._enforce_rate_limit(
                "password_reset",
                f"password_reset_{normalized}",
                self._config.rate_limits.password_reset,
                email=normalized,
            )
            try:
                await self._auth.reset_password_for_email(email.strip(), redirect_to)
            except Exception as e:
                raise self._backend_failure(
                    SecurityEventType.AUTH_FAILED, "password_reset", e, email=normalized
                ) from e
        except GateError as e:
            return self._fail(e, "Password reset failed")

        self._events.log(SecurityEventType.PASSWORD_RESET_REQUEST, {"email": normalized})
        self._notifier.success(
            "Check your email", "We've sent you a link to reset your password."
        )
        return GateResult()

    def _invalid_reset_link(self, reason: str) -> ValidationFailed:
        self._events.log(SecurityEventType.INVALID_SESSION, {"reason": reason})
        return ValidationFailed([self._config.error_messages.invalid_reset_link])

    async def update_password(
        self, reset_link: str, password: str, confirm_password: str
    ) -> GateResult[User]:
        """Set a new password using the tokens carried by a reset link."""
        try:
            tokens = parse_reset_link(reset_link)
            if tokens is None:
                raise self._invalid_reset_link("invalid_reset_link")
            try:
                claims = read_unverified_claims(tokens.access_token)
            except jwt.ExpiredSignatureError:
                raise self._invalid_reset_link("expired_reset_link") from None
            user_id = claims.get("sub") if claims else None

            self._validated(
                "password_update",
                validate_password_confirmation(
                    password, confirm_password, self._config.input_limits
                ),
                user_id=user_id,
            )
            try:
                user = await self._auth.update_user(tokens.access_token, password)
            except Exception as e:
                raise self._backend_failure(
                    SecurityEventType.AUTH_FAILED, "password_update", e, user_id=user_id
                ) from e
        except GateError as e:
            return self._fail(e, "Password reset failed")

        self._events.log(SecurityEventType.PASSWORD_UPDATED, {"user_id": user.id})
        self._notifier.success(
            "Password updated successfully!", "You can now sign in with your new password."
        )
        return GateResult(data=user)

    # -- applications ----------------------------------------------------

    async def submit_application(
        self, data: ApplicationInput | Mapping[str, Any]
    ) -> GateResult[ApplicationRecord]:
        """Validate, sanitize and persist an application for the signed-in user."""
        try:
            user = await self._require_user("submit_application")
        except AuthenticationRequired as e:
            self._notifier.failure(
                "Authentication required", "Please sign in to submit an application."
            )
            return GateResult(error=e)
        except GateError as e:
            return self._fail(e, "Submission failed")

        try:
            self._validated(
                "submit_application",
                validate_application_data(data, self._config.input_limits),
                user_id=user.id,
            )
            application = (
                data if isinstance(data, ApplicationInput) else ApplicationInput.from_dict(data)
            )
            self._enforce_rate_limit(
                "submit_application",
                f"application_{user.id}",
                self._config.rate_limits.application_submit,
                user_id=user.id,
            )
            row = {
                "user_id": user.id,
                **sanitize_application(application).to_dict(),
                "status": APPLICATION_STATUS_SUBMITTED,
            }
            try:
                record = await self._persistence.insert_application(row)
            except Exception as e:
                raise self._backend_failure(
                    SecurityEventType.APPLICATION_SUBMISSION_FAILED,
                    "submit_application",
                    e,
                    user_id=user.id,
                ) from e
        except GateError as e:
            return self._fail(e, "Submission failed")

        self._events.log(
            SecurityEventType.APPLICATION_SUBMITTED,
            {"user_id": user.id, "application_id": record.id},
        )
        self._notifier.success(
            "Application Submitted!",
            "Thank you for your interest. We'll be in touch within 48 hours.",
        )
        return GateResult(data=record)

    async def fetch_profile(self) -> GateResult[Profile]:
        try:
            user = await self._require_user("fetch_profile")
            self._enforce_read_limit("fetch_profile", user)
            try:
                profile = await self._persistence.get_profile(user.id)
            except Exception as e:
                raise self._backend_failure(
                    SecurityEventType.PROFILE_FETCH_FAILED, "fetch_profile", e, user_id=user.id
                ) from e
        except AuthenticationRequired as e:
            return GateResult(error=e)
        except GateError as e:
            return self._fail(e, "Error fetching profile")
        return GateResult(data=profile)

    async def fetch_applications(self, is_admin: bool = False) -> GateResult[list[ApplicationRecord]]:
        """List the caller's applications, or every application for an admin.

        ``is_admin`` is honoured only when the caller's profile says so.
        """
        try:
            user = await self._require_user("fetch_applications")
            self._enforce_read_limit("fetch_applications", user)
            owner: str | None = user.id
            if is_admin:
                try:
                    profile = await self._persistence.get_profile(user.id)
                except Exception as e:
                    raise self._backend_failure(
                        SecurityEventType.PROFILE_FETCH_FAILED,
                        "fetch_applications",
                        e,
                        user_id=user.id,
                    ) from e
                if profile is not None and profile.is_admin:
                    owner = None
                    self._events.log(
                        SecurityEventType.ADMIN_ACTION,
                        {"action": "fetch_applications", "user_id": user.id},
                    )
                else:
                    self._events.log(
                        SecurityEventType.UNAUTHORIZED_ACCESS,
                        {"action": "fetch_applications", "user_id": user.id, "requested": "admin"},
                    )
            try:
                records = await self._persistence.list_applications(owner)
            except Exception as e:
                raise self._backend_failure(
                    SecurityEventType.APPLICATIONS_FETCH_FAILED,
                    "fetch_applications",
                    e,
                    user_id=user.id,
                ) from e
        except AuthenticationRequired as e:
            return GateResult(error=e)
        except GateError as e:
            return self._fail(e, "Error fetching applications")
        return GateResult(data=records)

    async def fetch_application_stats(self) -> GateResult[list[ApplicationStats]]:
        try:
            user = await self._require_user("fetch_application_stats")
            self._enforce_read_limit("fetch_application_stats", user)
            try:
                stats = await self._persistence.list_application_stats()
            except Exception as e:
                raise self._backend_failure(
                    SecurityEventType.APPLICATION_STATS_FETCH_FAILED,
                    "fetch_application_stats",
                    e,
                    user_id=user.id,
                ) from e
        except AuthenticationRequired as e:
            return GateResult(error=e)
        except GateError as e:
            return self._fail(e, "Error fetching application statistics")
        return GateResult(data=stats)

    # -- csp -------------------------------------------------------------

    def report_csp_violation(self, payload: Mapping[str, Any]) -> GateResult[None]:
        """Record a browser CSP violation report as a security event.

        Reports are ignored unless ``features.csp_enabled`` is set.
        """
        if not self._config.features.csp_enabled:
            return GateResult()
        details = parse_csp_report(payload)
        try:
            self._validated(
                "csp_report",
                ValidationResult.ok() if details else ValidationResult.failed("Invalid CSP report"),
            )
        except GateError as e:
            return GateResult(error=e)
        self._events.log(SecurityEventType.CSP_VIOLATION, details)
        return GateResult()
