"""
Role Rule Resolver

Resolves the human-readable access rules of the role a binding references,
whether it is a namespaced Role or a ClusterRole bound locally or globally.
"""

import logging
from typing import Optional, Sequence

from ..core.constants import KubernetesConstants
from .models import PermissionSnapshot, RawOrRole, as_role
from .rule_formatter import format_rules

logger = logging.getLogger(__name__)

ROLE_KIND = KubernetesConstants.ResourceKind.ROLE
CLUSTER_ROLE_KIND = KubernetesConstants.ResourceKind.CLUSTER_ROLE


def find_access_rules(roles: Optional[Sequence[RawOrRole]], role_name: str,
                      kind: str = str(ROLE_KIND)) -> str:
    """
    Format the rules of every role in `roles` named `role_name`.

    Args:
        roles: Roles or ClusterRoles, decoded or raw
        role_name: Exact role name to match
        kind: Kind used in error messages for raw records

    Returns:
        str: One newline-terminated line per rule, "" if nothing matches

    Raises:
        MalformedRecordError: If a role record cannot be decoded
    """
    rules = ""
    for record in roles or []:
        role = as_role(record, kind)
        if role.name == role_name:
            rules += format_rules(role.rules)
    return rules


def lookup_role_rules(binding_namespace: str, role_name: str, snapshot: PermissionSnapshot,
                      role_kind: Optional[str] = None) -> str:
    """
    List the access rules referenced by a binding.

    Without a role kind the reference is ambiguous: a RoleBinding may point at a
    Role of its namespace or at a ClusterRole bound locally. Both are searched and
    ClusterRole rules come first. With `role_kind` set to Role or ClusterRole
    only that collection is searched.

    Args:
        binding_namespace: Namespace of the binding; "" for ClusterRoleBindings
        role_name: Name from the binding's roleRef
        snapshot: Permission snapshot to search
        role_kind: Optional roleRef.kind

    Returns:
        str: Concatenated rule lines, "" when the role has no (known) rules

    Raises:
        MalformedRecordError: If a role record cannot be decoded
    """
    namespace_rules = ""
    cluster_rules = ""

    if binding_namespace and role_kind != CLUSTER_ROLE_KIND:
        # only the binding's own namespace, never a same-named Role elsewhere
        namespace_rules = find_access_rules(snapshot.roles.get(binding_namespace), role_name,
                                            str(ROLE_KIND))

    if role_kind != ROLE_KIND:
        cluster_rules = find_access_rules(snapshot.cluster_roles, role_name, str(CLUSTER_ROLE_KIND))

    logger.debug(f"Rules for {role_kind or 'role'} '{role_name}' bound in "
                 f"'{binding_namespace or '<cluster>'}': "
                 f"{len(cluster_rules.splitlines())} cluster, "
                 f"{len(namespace_rules.splitlines())} namespaced")
    return cluster_rules + namespace_rules
