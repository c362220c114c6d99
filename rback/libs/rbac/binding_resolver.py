"""
Binding Resolver

Finds the bindings that grant a given identity access, pairing each binding
with the role it references.
"""

import logging
from typing import List, Optional, Sequence

from .models import BindingAndRole, RawOrBinding, as_binding

logger = logging.getLogger(__name__)


def lookup_bindings_and_roles(bindings: Optional[Sequence[RawOrBinding]], target_name: str,
                              target_namespace: str) -> List[BindingAndRole]:
    """
    List bindings & roles for a given identity.

    A subject matches when both its name and namespace equal the target's;
    every match yields one result, in binding order.

    Args:
        bindings: RoleBindings or ClusterRoleBindings, decoded or raw
        target_name: Name of the identity (e.g. a ServiceAccount)
        target_namespace: Namespace of the identity; "" for cluster-scoped

    Returns:
        List of BindingAndRole, empty when nothing matches

    Raises:
        MalformedRecordError: If a binding lacks metadata or roleRef fields
    """
    results = []
    for record in bindings or []:
        binding = as_binding(record)
        role = binding.role_identity
        for subject in binding.subjects:
            if subject.matches(target_name, target_namespace):
                results.append(BindingAndRole(
                    binding=binding.identity,
                    role=role,
                    role_kind=binding.role_ref.kind or None,
                ))

    logger.debug(f"Identity {target_namespace}/{target_name}: {len(results)} binding match(es)")
    return results
