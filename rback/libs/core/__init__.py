"""
Core Libraries

Shared functionality and utilities for the rback tool.
"""

from .auth import KubernetesAuth
from .config import ConfigManager, RenderOptions
from .exceptions import (
    RbackError,
    RetrievalError,
    AuthenticationError,
    MalformedRecordError,
    ConfigurationError,
)
from .utils import setup_logging, normalize_kind, parse_ignored_prefixes, should_ignore

__all__ = [
    'KubernetesAuth',
    'ConfigManager',
    'RenderOptions',
    'RbackError',
    'RetrievalError',
    'AuthenticationError',
    'MalformedRecordError',
    'ConfigurationError',
    'setup_logging',
    'normalize_kind',
    'parse_ignored_prefixes',
    'should_ignore',
]
