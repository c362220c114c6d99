"""
rback Library

Record retrieval, RBAC resolution and graph construction for the rback tool.
"""

# Core libraries
from .core import ConfigManager, KubernetesAuth, RenderOptions
from .core.exceptions import (
    RbackError,
    RetrievalError,
    AuthenticationError,
    MalformedRecordError,
    ConfigurationError,
)

# RBAC libraries
from .rbac import (
    ClusterRecordStore,
    FileRecordStore,
    PermissionCollector,
    PermissionSnapshot,
    lookup_bindings_and_roles,
    lookup_role_rules,
    format_rule,
)

# Graph libraries
from .graph import Graph, GraphModelBuilder, DotRenderer

# Main application
from .main_app import RbackApplication, main

__all__ = [
    # Core
    'ConfigManager',
    'KubernetesAuth',
    'RenderOptions',
    'RbackError',
    'RetrievalError',
    'AuthenticationError',
    'MalformedRecordError',
    'ConfigurationError',
    # RBAC
    'ClusterRecordStore',
    'FileRecordStore',
    'PermissionCollector',
    'PermissionSnapshot',
    'lookup_bindings_and_roles',
    'lookup_role_rules',
    'format_rule',
    # Graph
    'Graph',
    'GraphModelBuilder',
    'DotRenderer',
    # Main
    'RbackApplication',
    'main'
]
