"""
Domain exceptions for authguard.

Every failure raised by the authentication layer is one of a closed set of
variants. Each variant fixes its code, message, severity, category and
retryability at class level, so two instances of the same variant always
agree on those fields. Call sites only supply the identifying data for the
failure (violations, a biometric reason, an optional cause).

Variants carry an ``ErrorKind`` tag. Callers dispatch on ``error.kind``
through tables keyed by every ``ErrorKind`` member instead of chains of
``isinstance`` checks.
"""

import secrets
import time
import traceback
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


class ErrorSeverity(str, Enum):
    """How bad a failure is for the user or the system."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """Broad family a failure belongs to."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    SYSTEM = "system"


class ErrorKind(str, Enum):
    """Tag identifying each variant of the taxonomy."""
    INVALID_CREDENTIALS = "invalid_credentials"
    PASSWORD_POLICY_VIOLATION = "password_policy_violation"
    USER_NOT_AUTHENTICATED = "user_not_authenticated"
    BIOMETRIC_NOT_AVAILABLE = "biometric_not_available"
    EMAIL_ALREADY_VERIFIED = "email_already_verified"
    INPUT_VALIDATION = "input_validation"
    GENERIC_AUTH = "generic_auth"


@dataclass(frozen=True)
class ErrorContext:
    """Where a failure happened and what was going on at the time."""
    feature: str
    action: str
    metadata: Mapping[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    stack_trace: Optional[str] = None
    user_id: Optional[str] = None
    request_id: Optional[str] = None

    def __post_init__(self):
        # Read-only view over a private copy.
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "feature": self.feature,
            "action": self.action,
            "metadata": dict(self.metadata),
            "timestamp": self.timestamp.isoformat(),
            "stack_trace": self.stack_trace,
            "user_id": self.user_id,
            "request_id": self.request_id,
        }


@dataclass(frozen=True)
class ErrorDetails:
    """Immutable description of a domain failure."""
    code: str
    message: str
    description: str
    severity: ErrorSeverity
    category: ErrorCategory
    retryable: bool
    context: ErrorContext
    cause: Optional[Exception] = None
    suggestions: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        if self.suggestions is not None:
            object.__setattr__(self, "suggestions", tuple(self.suggestions))


def sanitize_cause(cause: Any) -> Optional[Exception]:
    """Keep ``cause`` only when it is an exception; anything else becomes None."""
    return cause if isinstance(cause, Exception) else None


def _to_base36(value: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if value == 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(digits[rem])
    return "".join(reversed(out))


def _generate_error_id(code: str) -> str:
    millis = int(time.time() * 1000)
    return f"{code}_{_to_base36(millis)}_{secrets.token_hex(3)}".upper()


class AuthDomainError(Exception):
    """
    Base exception for the error taxonomy.

    Instances own an ``ErrorDetails`` and expose its fields read-only.
    Use ``with_context`` to derive an enriched copy; the original is
    never mutated.
    """

    kind: ErrorKind = ErrorKind.GENERIC_AUTH

    def __init__(self, details: ErrorDetails):
        super().__init__(details.message)
        self._details = details
        self._error_id = _generate_error_id(details.code)
        if details.cause is not None:
            self.__cause__ = details.cause

    @property
    def details(self) -> ErrorDetails:
        return self._details

    @property
    def error_id(self) -> str:
        return self._error_id

    @property
    def code(self) -> str:
        return self._details.code

    @property
    def message(self) -> str:
        return self._details.message

    @property
    def description(self) -> str:
        return self._details.description

    @property
    def severity(self) -> ErrorSeverity:
        return self._details.severity

    @property
    def category(self) -> ErrorCategory:
        return self._details.category

    @property
    def retryable(self) -> bool:
        return self._details.retryable

    @property
    def cause(self) -> Optional[Exception]:
        return self._details.cause

    @property
    def context(self) -> ErrorContext:
        return self._details.context

    @property
    def suggestions(self) -> Optional[List[str]]:
        if self._details.suggestions is None:
            return None
        return list(self._details.suggestions)

    @property
    def user_message(self) -> str:
        """Message safe to show to the end user."""
        return self.message

    @property
    def technical_details(self) -> str:
        """Developer-facing elaboration."""
        return self.description or self.message

    def with_context(self, **fields: Any) -> "AuthDomainError":
        """
        Return a new error of the same variant with extra context.

        ``metadata`` is merged into the existing metadata; any other
        keyword replaces the matching ``ErrorContext`` field.

        Args:
            **fields: ErrorContext fields to add or override

        Returns:
            New error instance; ``self`` is left untouched
        """
        metadata = fields.pop("metadata", None)
        merged = dict(self.context.metadata)
        if metadata:
            merged.update(metadata)
        context = replace(self.context, metadata=merged, **fields)
        details = replace(self._details, context=context)

        clone = self.__class__.__new__(self.__class__)
        variant_fields = {
            key: value for key, value in self.__dict__.items()
            if key not in ("_details", "_error_id")
        }
        AuthDomainError.__init__(clone, details)
        clone.__dict__.update(variant_fields)
        return clone

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        stack = None
        if self.__traceback__ is not None:
            stack = "".join(traceback.format_tb(self.__traceback__))
        return {
            "error_id": self.error_id,
            "name": type(self).__name__,
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
            "description": self.description,
            "severity": self.severity.value,
            "category": self.category.value,
            "retryable": self.retryable,
            "context": self.context.to_dict(),
            "suggestions": self.suggestions,
            "stack": stack,
            "cause": {
                "name": type(self.cause).__name__,
                "message": str(self.cause),
            } if self.cause is not None else None,
        }

    @classmethod
    def from_unknown(cls, error: Any) -> "AuthDomainError":
        """Return ``error`` if it is already a domain error, else wrap it."""
        if isinstance(error, AuthDomainError):
            return error
        return GenericAuthError(cause=error)


def is_domain_error(value: Any) -> bool:
    """True when ``value`` belongs to the error taxonomy."""
    return isinstance(value, AuthDomainError)


class InvalidCredentialsError(AuthDomainError):
    """Raised when the supplied credentials do not match an account."""

    kind = ErrorKind.INVALID_CREDENTIALS
    CODE = "AUTH_INVALID_CREDS_001"

    def __init__(self, cause: Any = None):
        super().__init__(ErrorDetails(
            code=self.CODE,
            message="Invalid credentials provided",
            description="Authentication failed due to invalid credentials",
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.AUTHENTICATION,
            retryable=False,
            cause=sanitize_cause(cause),
            context=ErrorContext(
                feature="auth",
                action="credential_validation",
                metadata={"security_event": "login_failed"},
            ),
            suggestions=[
                "Verify your email and password",
                "Check for caps lock",
                "Try password reset if needed",
            ],
        ))


class PasswordPolicyViolationError(AuthDomainError):
    """Raised when a new password breaks one or more policy rules."""

    kind = ErrorKind.PASSWORD_POLICY_VIOLATION
    CODE = "AUTH_POLICY_VIOLATION_001"
    DEFAULT_SUGGESTIONS = (
        "Review the password requirements below",
        "Choose a password that meets all criteria",
        "Use a password manager for strong passwords",
    )

    def __init__(
        self,
        violations: Sequence[str],
        suggestions: Optional[Sequence[str]] = None,
        cause: Any = None,
    ):
        violations = list(violations)
        super().__init__(ErrorDetails(
            code=self.CODE,
            message="Password does not meet policy requirements",
            description="The provided password violates one or more security policy requirements",
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.VALIDATION,
            retryable=True,
            cause=sanitize_cause(cause),
            context=ErrorContext(
                feature="auth",
                action="password_policy_validation",
                metadata={
                    "security_event": "password_policy_violation",
                    "violation_count": len(violations),
                    "violations": tuple(violations),
                },
            ),
            suggestions=list(suggestions) if suggestions else list(self.DEFAULT_SUGGESTIONS),
        ))
        self._violations = tuple(violations)
        self._custom_suggestions = tuple(suggestions) if suggestions else None

    @property
    def violations(self) -> List[str]:
        return list(self._violations)

    @property
    def custom_suggestions(self) -> Optional[List[str]]:
        """Suggestions passed by the caller, None when defaults were used."""
        if self._custom_suggestions is None:
            return None
        return list(self._custom_suggestions)


class UserNotAuthenticatedError(AuthDomainError):
    """Raised when an operation needs an actor and there is none."""

    kind = ErrorKind.USER_NOT_AUTHENTICATED
    CODE = "AUTH_NOT_AUTHENTICATED_001"

    def __init__(self, cause: Any = None):
        super().__init__(ErrorDetails(
            code=self.CODE,
            message="Authentication required",
            description="User must be authenticated to access this resource",
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.AUTHORIZATION,
            retryable=True,
            cause=sanitize_cause(cause),
            context=ErrorContext(
                feature="auth",
                action="authentication_check",
                metadata={"security_event": "unauthorized_access_attempt"},
            ),
            suggestions=[
                "Please sign in to continue",
                "Your session may have expired",
            ],
        ))


class BiometricNotAvailableError(AuthDomainError):
    """Raised when the device cannot perform biometric authentication."""

    kind = ErrorKind.BIOMETRIC_NOT_AVAILABLE
    CODE = "AUTH_BIOMETRIC_UNAVAILABLE_001"

    def __init__(self, reason: Optional[str] = None, cause: Any = None):
        metadata: Dict[str, Any] = {"security_event": "biometric_unavailable"}
        if reason:
            metadata["reason"] = reason
        super().__init__(ErrorDetails(
            code=self.CODE,
            message="Biometric authentication not available",
            description="Biometric authentication is not available on this device",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.SYSTEM,
            retryable=False,
            cause=sanitize_cause(cause),
            context=ErrorContext(
                feature="auth",
                action="biometric_check",
                metadata=metadata,
            ),
            suggestions=[
                "Check that biometrics are enrolled in your device settings",
                "Use your password to sign in instead",
            ],
        ))
        self._reason = reason

    @property
    def reason(self) -> Optional[str]:
        return self._reason


class EmailAlreadyVerifiedError(AuthDomainError):
    """Raised when verification is requested for an already verified email."""

    kind = ErrorKind.EMAIL_ALREADY_VERIFIED
    CODE = "AUTH_EMAIL_VERIFIED_001"

    def __init__(self, cause: Any = None):
        super().__init__(ErrorDetails(
            code=self.CODE,
            message="Email address is already verified",
            description="A verification was requested for an email address that is already verified",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            retryable=False,
            cause=sanitize_cause(cause),
            context=ErrorContext(
                feature="auth",
                action="email_verification",
                metadata={"security_event": "email_already_verified"},
            ),
            suggestions=["You can sign in with your verified email address"],
        ))


class InputValidationError(AuthDomainError, ValueError):
    """
    Raised when request input is rejected before any I/O happens.

    Unlike the other variants the message comes from the call site,
    since it names the input rule that failed.
    """

    kind = ErrorKind.INPUT_VALIDATION
    CODE = "AUTH_INPUT_INVALID_001"

    def __init__(self, message: str, field_name: Optional[str] = None):
        metadata: Dict[str, Any] = {}
        if field_name:
            metadata["field"] = field_name
        super().__init__(ErrorDetails(
            code=self.CODE,
            message=message,
            description="Request input failed validation before reaching the account store",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            retryable=True,
            context=ErrorContext(
                feature="auth",
                action="input_validation",
                metadata=metadata,
            ),
        ))
        self._field_name = field_name

    @property
    def field_name(self) -> Optional[str]:
        return self._field_name


class GenericAuthError(AuthDomainError):
    """Catch-all wrapper for failures outside the taxonomy."""

    kind = ErrorKind.GENERIC_AUTH
    CODE = "AUTH_GENERIC_001"

    def __init__(self, cause: Any = None):
        super().__init__(ErrorDetails(
            code=self.CODE,
            message="Authentication operation failed",
            description="An unexpected error occurred during an authentication operation",
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.AUTHENTICATION,
            retryable=False,
            cause=sanitize_cause(cause),
            context=ErrorContext(
                feature="auth",
                action="auth_operation",
            ),
            suggestions=[
                "Please try again",
                "Contact support if the problem persists",
            ],
        ))
