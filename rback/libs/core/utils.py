"""
Core Utilities

Common utility functions used across the rback tool.
"""

import logging
from typing import List, Sequence, Type

import urllib3

from .constants import ErrorMessages, KubernetesConstants
from .exceptions import AuthenticationError, RbackError, RetrievalError


def setup_logging(debug: bool = False) -> None:
    """
    Set up logging configuration for the application.

    Args:
        debug: Enable debug logging level
    """
    level = logging.DEBUG if debug else logging.INFO

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Console handler writes to stderr so that DOT output on stdout stays clean
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Reduce noise from the HTTP stack
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('kubernetes').setLevel(logging.WARNING)

    if debug:
        logger = logging.getLogger(__name__)
        logger.debug("Debug mode enabled")


def disable_ssl_warnings() -> None:
    """Disable SSL warnings when --skip-tls is used"""
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)


def normalize_kind(kind: str) -> str:
    """
    Normalize a resource kind given on the command line.

    Args:
        kind: Resource kind as typed by the user (e.g. "sa", "ServiceAccounts")

    Returns:
        str: Lower-cased canonical kind
    """
    kind = (kind or "").lower()
    return KubernetesConstants.KIND_ALIASES.get(kind, kind)


def parse_ignored_prefixes(value: str) -> List[str]:
    """
    Parse the comma-delimited ignore-prefix option.

    Args:
        value: Raw option value; "none" disables filtering

    Returns:
        List of prefixes in the order given
    """
    if value is None or value == KubernetesConstants.NO_IGNORED_PREFIXES:
        return []
    return [prefix for prefix in value.split(",") if prefix]


def should_ignore(name: str, prefixes: Sequence[str]) -> bool:
    """Check whether a name starts with any of the ignored prefixes"""
    return any(name.startswith(prefix) for prefix in prefixes)


def handle_api_error(error: Exception, action: str,
                     exception_class: Type[RbackError] = RetrievalError) -> None:
    """
    Centralized API error handling for Kubernetes API exceptions

    Args:
        error: The caught exception (ApiException or other)
        action: What was being attempted, used in the message (e.g. "list roles")
        exception_class: The specific exception class to raise

    Raises:
        RbackError: Appropriate error type with user-friendly message
    """
    status = getattr(error, "status", None)
    error_str = str(error).lower()

    if status == 401 or "unauthorized" in error_str:
        raise AuthenticationError(str(ErrorMessages.APIError.UNAUTHORIZED)) from error

    if status == 403 or "forbidden" in error_str:
        raise exception_class(ErrorMessages.APIError.FORBIDDEN.format(action=action)) from error

    if status == 404:
        raise exception_class(ErrorMessages.APIError.NOT_FOUND.format(action=action)) from error

    if "certificate verify failed" in error_str or "certificate_verify_failed" in error_str:
        raise exception_class(
            ErrorMessages.APIError.SSL_VERIFICATION_FAILED.format(action=action)
        ) from error

    if any(indicator in error_str for indicator in ["connection", "timeout", "refused", "max retries"]):
        raise exception_class(
            ErrorMessages.APIError.CONNECTION_FAILED.format(action=action, error=error)
        ) from error

    raise exception_class(f"API error while trying to {action}: {error}") from error
