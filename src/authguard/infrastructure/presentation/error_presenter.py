"""
ErrorPresenter - User-friendly error message generation.

Turns taxonomy errors into messages and next steps a user can act on.
Messages never include credentials, emails or backend internals; verbose
mode adds technical details for developers.
"""

import traceback
from typing import Callable, Dict, List, Tuple

from ...domain.exceptions import AuthDomainError, ErrorKind


# One entry per ErrorKind. The second element builds the suggestion list.
_KIND_PRESENTATION: Dict[ErrorKind, Tuple[str, Callable[[AuthDomainError], List[str]]]] = {
    ErrorKind.INVALID_CREDENTIALS: (
        "The credentials you entered are not valid",
        lambda error: error.suggestions or [],
    ),
    ErrorKind.PASSWORD_POLICY_VIOLATION: (
        "Your new password does not meet the password policy",
        lambda error: error.violations + (error.suggestions or []),
    ),
    ErrorKind.USER_NOT_AUTHENTICATED: (
        "You need to sign in to do this",
        lambda error: error.suggestions or [],
    ),
    ErrorKind.BIOMETRIC_NOT_AVAILABLE: (
        "Biometric authentication is not available on this device",
        lambda error: error.suggestions or [],
    ),
    ErrorKind.EMAIL_ALREADY_VERIFIED: (
        "Your email address is already verified",
        lambda error: error.suggestions or [],
    ),
    ErrorKind.INPUT_VALIDATION: (
        "Some of the information you entered is not valid",
        lambda error: [error.message],
    ),
    ErrorKind.GENERIC_AUTH: (
        "The operation could not be completed",
        lambda error: error.suggestions or [],
    ),
}


class ErrorPresenter:
    """
    Presents errors to users with helpful messages and actions.

    Provides two modes:
    - Normal: User-friendly message with actionable suggestions
    - Verbose: Adds code, error id, category, severity and traceback
    """

    @staticmethod
    def present(error: BaseException, verbose: bool = False) -> str:
        """
        Present error with user-friendly message.

        Args:
            error: Exception to present
            verbose: Show technical details

        Returns:
            Formatted error message
        """
        message, suggestions = ErrorPresenter._get_friendly_message(error)

        if verbose:
            return ErrorPresenter._format_verbose(error, message, suggestions)
        return ErrorPresenter._format_friendly(message, suggestions)

    @staticmethod
    def _get_friendly_message(error: BaseException) -> Tuple[str, List[str]]:
        """
        Get friendly message and actionable suggestions for error.

        Args:
            error: Exception to analyze

        Returns:
            Tuple of (message, suggestions)
        """
        if isinstance(error, AuthDomainError):
            message, build_suggestions = _KIND_PRESENTATION[error.kind]
            return message, build_suggestions(error)

        if isinstance(error, KeyboardInterrupt):
            return ("Operation cancelled by user", [])

        if isinstance(error, FileNotFoundError):
            return (
                "A required file was not found",
                [
                    "Check the file path is correct",
                    "Ensure the file exists",
                ]
            )

        return (
            "An unexpected error occurred",
            [
                "Please try again",
                "Run with --verbose for more information",
            ]
        )

    @staticmethod
    def _format_friendly(message: str, suggestions: List[str]) -> str:
        """
        Format user-friendly error message.

        Args:
            message: Main error message
            suggestions: List of actionable suggestions

        Returns:
            Formatted string
        """
        output = [f"Error: {message}"]

        if suggestions:
            output.append("")
            output.append("Suggestions:")
            for suggestion in suggestions:
                output.append(f"  - {suggestion}")

        return "\n".join(output)

    @staticmethod
    def _format_verbose(error: BaseException, message: str, suggestions: List[str]) -> str:
        """
        Format verbose error message with technical details.

        Args:
            error: Original exception
            message: User-friendly message
            suggestions: Actionable suggestions

        Returns:
            Formatted string with full details
        """
        output = [ErrorPresenter._format_friendly(message, suggestions)]

        output.append("")
        output.append("Technical Details:")
        output.append(f"  Error Type: {type(error).__name__}")
        output.append(f"  Error Message: {str(error)}")

        if isinstance(error, AuthDomainError):
            output.append(f"  Code: {error.code}")
            output.append(f"  Error ID: {error.error_id}")
            output.append(f"  Category: {error.category.value}")
            output.append(f"  Severity: {error.severity.value}")
            output.append(f"  Retryable: {'yes' if error.retryable else 'no'}")

        if error.__cause__:
            output.append(f"  Caused by: {type(error.__cause__).__name__}: {str(error.__cause__)}")

        output.append("")
        output.append("Traceback:")
        tb_lines = traceback.format_exception(type(error), error, error.__traceback__)
        for line in tb_lines:
            for sub_line in line.rstrip().split('\n'):
                output.append(f"  {sub_line}")

        return "\n".join(output)
