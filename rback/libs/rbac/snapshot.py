"""
Snapshot Collector

Builds the permission snapshot for one run: one sequential store call per
resource kind, ignore-prefix filtering at ingestion, and decoding of every
surviving record.
"""

import logging
from typing import Any, Dict, List, Sequence

from ..core.config import RenderOptions
from ..core.constants import KubernetesConstants
from ..core.protocols import RecordStore
from ..core.utils import should_ignore
from .models import BindingRecord, NamespacedName, PermissionSnapshot, RoleRecord

logger = logging.getLogger(__name__)

ResourceKind = KubernetesConstants.ResourceKind


class PermissionCollector:
    """Collects and filters all access control related records"""

    def __init__(self, store: RecordStore, options: RenderOptions):
        """
        Initialize the collector

        Args:
            store: Record store to read from
            options: Namespace scope, resource names and ignored prefixes
        """
        self.store = store
        self.options = options

    def _keep(self, identity: NamespacedName, kind: ResourceKind) -> bool:
        if should_ignore(identity.name, self.options.ignored_prefixes):
            logger.debug(f"Ignoring {kind.value} {identity}")
            return False
        return True

    def _roles(self, records: Sequence[Dict[str, Any]], kind: ResourceKind) -> List[RoleRecord]:
        # Names are checked before the full decode so ignored records are never resolved
        return [
            RoleRecord.from_dict(record, kind.value) for record in records
            if self._keep(NamespacedName.from_metadata(record, kind.value), kind)
        ]

    def _bindings(self, records: Sequence[Dict[str, Any]], kind: ResourceKind) -> List[BindingRecord]:
        return [
            BindingRecord.from_dict(record, kind.value) for record in records
            if self._keep(NamespacedName.from_metadata(record, kind.value), kind)
        ]

    @staticmethod
    def _by_namespace(records: Sequence[Any]) -> Dict[str, List[Any]]:
        grouped: Dict[str, List[Any]] = {}
        for record in records:
            grouped.setdefault(record.namespace, []).append(record)
        return grouped

    def collect(self) -> PermissionSnapshot:
        """
        Retrieve data about all access control related objects, from service
        accounts to roles and bindings, both namespaced and cluster-level.

        Returns:
            PermissionSnapshot with insertion-ordered namespace mappings

        Raises:
            RetrievalError: If a store call fails
            MalformedRecordError: If a record cannot be decoded
        """
        snapshot = PermissionSnapshot()

        sa_names = self.options.service_account_names
        for record in self.store.get_service_accounts(self.options.namespace, sa_names):
            identity = NamespacedName.from_metadata(record, ResourceKind.SERVICE_ACCOUNT.value)
            snapshot.service_accounts.setdefault(identity.namespace, []).append(identity.name)

        snapshot.roles = self._by_namespace(self._roles(self.store.list_roles(), ResourceKind.ROLE))
        snapshot.role_bindings = self._by_namespace(
            self._bindings(self.store.list_role_bindings(), ResourceKind.ROLE_BINDING)
        )
        snapshot.cluster_roles = self._roles(self.store.list_cluster_roles(), ResourceKind.CLUSTER_ROLE)
        snapshot.cluster_role_bindings = self._bindings(
            self.store.list_cluster_role_bindings(), ResourceKind.CLUSTER_ROLE_BINDING
        )

        logger.info("Permission snapshot collected:")
        logger.info(f"   ServiceAccounts: {sum(len(v) for v in snapshot.service_accounts.values())} "
                    f"in {len(snapshot.service_accounts)} namespace(s)")
        logger.info(f"   Roles: {sum(len(v) for v in snapshot.roles.values())}, "
                    f"RoleBindings: {sum(len(v) for v in snapshot.role_bindings.values())}")
        logger.info(f"   ClusterRoles: {len(snapshot.cluster_roles)}, "
                    f"ClusterRoleBindings: {len(snapshot.cluster_role_bindings)}")
        return snapshot


def collect_permissions(store: RecordStore, options: RenderOptions) -> PermissionSnapshot:
    """Convenience wrapper around PermissionCollector.collect()"""
    return PermissionCollector(store, options).collect()
