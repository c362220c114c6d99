"""
RBAC Libraries

Record models, record stores and the resolution logic that matches bindings
to identities and roles to their access rules.
"""

from .models import (
    NamespacedName,
    PolicyRule,
    RoleRecord,
    RoleRef,
    Subject,
    BindingRecord,
    BindingAndRole,
    PermissionSnapshot,
)
from .rule_formatter import format_rule, format_rules
from .binding_resolver import lookup_bindings_and_roles
from .role_resolver import lookup_role_rules, find_access_rules
from .record_store import ClusterRecordStore, FileRecordStore
from .snapshot import PermissionCollector, collect_permissions

__all__ = [
    'NamespacedName',
    'PolicyRule',
    'RoleRecord',
    'RoleRef',
    'Subject',
    'BindingRecord',
    'BindingAndRole',
    'PermissionSnapshot',
    'format_rule',
    'format_rules',
    'lookup_bindings_and_roles',
    'lookup_role_rules',
    'find_access_rules',
    'ClusterRecordStore',
    'FileRecordStore',
    'PermissionCollector',
    'collect_permissions',
]
