"""
Record Stores

Sources of raw RBAC records. The cluster store reads a live cluster through the
Kubernetes API; the file store reads a saved `kubectl get ... -o yaml|json` dump.
Both return plain camelCase mappings, one call per resource kind.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import urllib3
import yaml
from kubernetes import client
from kubernetes.client.rest import ApiException

from ..core.constants import KubernetesConstants
from ..core.exceptions import RetrievalError
from ..core.utils import handle_api_error

logger = logging.getLogger(__name__)

ResourceKind = KubernetesConstants.ResourceKind


def unwrap_items(payload: Any) -> List[Dict[str, Any]]:
    """
    Flatten a store payload into a list of records.

    A `List` wrapper (or anything carrying `items`) yields its items, a list
    yields each element unwrapped, and any other mapping is a single record.

    Raises:
        RetrievalError: If the payload is not made of mappings
    """
    if payload is None:
        return []
    if isinstance(payload, list):
        records = []
        for element in payload:
            records.extend(unwrap_items(element))
        return records
    if not isinstance(payload, dict):
        raise RetrievalError(f"Unparsable record payload of type {type(payload).__name__}")
    if payload.get("kind") == KubernetesConstants.LIST_KIND or "items" in payload:
        items = payload.get("items") or []
        if not isinstance(items, list):
            raise RetrievalError("Unparsable record payload: 'items' is not a list")
        return unwrap_items(items)
    return [payload]


def _metadata_field(record: Dict[str, Any], key: str) -> Optional[str]:
    metadata = record.get("metadata")
    if isinstance(metadata, dict):
        return metadata.get(key)
    return None


def filter_service_accounts(records: List[Dict[str, Any]], namespace: str = "",
                            names: Sequence[str] = ()) -> List[Dict[str, Any]]:
    """Keep ServiceAccount records of `namespace` (all if empty) named in `names` (all if empty)"""
    return [
        record for record in records
        if (not namespace or _metadata_field(record, "namespace") == namespace)
        and (not names or _metadata_field(record, "name") in names)
    ]


class ClusterRecordStore:
    """Reads RBAC records from a live cluster"""

    def __init__(self, api_client: client.ApiClient, core_api: client.CoreV1Api,
                 rbac_api: client.RbacAuthorizationV1Api):
        """
        Initialize the cluster store

        Args:
            api_client: API client used to serialize model objects
            core_api: CoreV1 API for ServiceAccounts
            rbac_api: RBAC API for (Cluster)Role(Binding)s
        """
        self.api_client = api_client
        self.core_api = core_api
        self.rbac_api = rbac_api

    def _call(self, action: str, request: Callable[[], Any]) -> List[Dict[str, Any]]:
        """Run one API request and serialize its items to mappings"""
        logger.debug(f"Kubernetes API: {action}")
        try:
            response = request()
        except (ApiException, urllib3.exceptions.HTTPError) as e:
            handle_api_error(e, action)
        items = getattr(response, "items", None)
        if items is None:
            items = [response]
        return unwrap_items([self.api_client.sanitize_for_serialization(item) for item in items])

    def get_service_accounts(self, namespace: str = "", names: Sequence[str] = ()) -> List[Dict[str, Any]]:
        """
        Get ServiceAccounts, across all namespaces when `namespace` is empty

        Args:
            namespace: Namespace to read from (empty = all)
            names: Restrict to these names (empty = all)

        Returns:
            List of ServiceAccount records
        """
        if namespace and names:
            records = []
            for name in names:
                records.extend(self._call(
                    f"get serviceaccount {namespace}/{name}",
                    lambda name=name: self.core_api.read_namespaced_service_account(name, namespace),
                ))
            return records

        if namespace:
            records = self._call(f"list serviceaccounts in namespace {namespace}",
                                 lambda: self.core_api.list_namespaced_service_account(namespace))
        else:
            records = self._call("list serviceaccounts in all namespaces",
                                 self.core_api.list_service_account_for_all_namespaces)
        return filter_service_accounts(records, names=names)

    def list_roles(self) -> List[Dict[str, Any]]:
        return self._call("list roles in all namespaces", self.rbac_api.list_role_for_all_namespaces)

    def list_role_bindings(self) -> List[Dict[str, Any]]:
        return self._call("list rolebindings in all namespaces",
                          self.rbac_api.list_role_binding_for_all_namespaces)

    def list_cluster_roles(self) -> List[Dict[str, Any]]:
        return self._call("list clusterroles", self.rbac_api.list_cluster_role)

    def list_cluster_role_bindings(self) -> List[Dict[str, Any]]:
        return self._call("list clusterrolebindings", self.rbac_api.list_cluster_role_binding)


class FileRecordStore:
    """Reads RBAC records from a saved JSON or YAML dump"""

    def __init__(self, path: str):
        """
        Initialize the file store

        Args:
            path: Path to a JSON file, or a single- or multi-document YAML file
        """
        self.path = Path(path).expanduser()
        self._records: Optional[List[Dict[str, Any]]] = None

    def _load(self) -> List[Dict[str, Any]]:
        """Parse the file once and cache all records"""
        if self._records is not None:
            return self._records

        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise RetrievalError(f"Cannot read records from {self.path}: {e}") from e

        try:
            if self.path.suffix.lower() == ".json":
                documents = [json.loads(content)]
            else:
                documents = list(yaml.safe_load_all(content))
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise RetrievalError(f"Cannot parse records in {self.path}: {e}") from e

        self._records = unwrap_items(documents)
        logger.info(f"Loaded {len(self._records)} record(s) from {self.path}")
        return self._records

    def _of_kind(self, kind: ResourceKind) -> List[Dict[str, Any]]:
        return [record for record in self._load() if record.get("kind") == kind.value]

    def get_service_accounts(self, namespace: str = "", names: Sequence[str] = ()) -> List[Dict[str, Any]]:
        return filter_service_accounts(self._of_kind(ResourceKind.SERVICE_ACCOUNT), namespace, names)

    def list_roles(self) -> List[Dict[str, Any]]:
        return self._of_kind(ResourceKind.ROLE)

    def list_role_bindings(self) -> List[Dict[str, Any]]:
        return self._of_kind(ResourceKind.ROLE_BINDING)

    def list_cluster_roles(self) -> List[Dict[str, Any]]:
        return self._of_kind(ResourceKind.CLUSTER_ROLE)

    def list_cluster_role_bindings(self) -> List[Dict[str, Any]]:
        return self._of_kind(ResourceKind.CLUSTER_ROLE_BINDING)

