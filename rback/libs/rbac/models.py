"""
RBAC Data Models

Typed records for the RBAC objects read from a record store. Raw mappings are
decoded once, at the store boundary, into these dataclasses; any missing or
mistyped field is reported as a MalformedRecordError instead of surfacing as a
KeyError or TypeError deep inside resolution.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from ..core.constants import KubernetesConstants
from ..core.exceptions import MalformedRecordError


def _require_mapping(value: Any, kind: str, path: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise MalformedRecordError(
            f"{kind}: expected '{path}' to be a mapping, got {type(value).__name__}",
            kind=kind, field=path,
        )
    return value


def _optional_str(data: Mapping[str, Any], key: str, kind: str, path: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedRecordError(
            f"{kind}: expected '{path}.{key}' to be a string, got {type(value).__name__}",
            kind=kind, field=f"{path}.{key}",
        )
    return value


def _required_str(data: Mapping[str, Any], key: str, kind: str, path: str) -> str:
    value = _optional_str(data, key, kind, path)
    if not value:
        raise MalformedRecordError(f"{kind}: missing required field '{path}.{key}'",
                                   kind=kind, field=f"{path}.{key}")
    return value


def _string_list(data: Mapping[str, Any], key: str, kind: str, path: str) -> List[str]:
    values = data.get(key)
    if values is None:
        return []
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise MalformedRecordError(f"{kind}: expected '{path}.{key}' to be a list of strings",
                                   kind=kind, field=f"{path}.{key}")
    return list(values)


def _object_list(data: Mapping[str, Any], key: str, kind: str) -> List[Any]:
    values = data.get(key)
    if values is None:
        return []
    if not isinstance(values, list):
        raise MalformedRecordError(
            f"{kind}: expected '{key}' to be a list, got {type(values).__name__}",
            kind=kind, field=key,
        )
    return values


@dataclass(frozen=True)
class NamespacedName:
    """Identity of an RBAC object; an empty namespace means cluster-scoped"""
    namespace: str
    name: str

    @property
    def is_cluster_scoped(self) -> bool:
        return not self.namespace

    @classmethod
    def from_metadata(cls, record: Any, kind: str) -> "NamespacedName":
        """Decode `metadata.namespace` / `metadata.name` of a raw record"""
        record = _require_mapping(record, kind, "<record>")
        metadata = _require_mapping(record.get("metadata"), kind, "metadata")
        return cls(
            namespace=_optional_str(metadata, "namespace", kind, "metadata"),
            name=_required_str(metadata, "name", kind, "metadata"),
        )

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}" if self.namespace else self.name


@dataclass
class PolicyRule:
    """
    A single access rule of a Role or ClusterRole.

    Every field is optional in the source record and decodes to an empty list.
    """
    verbs: List[str] = field(default_factory=list)
    resources: List[str] = field(default_factory=list)
    resource_names: List[str] = field(default_factory=list)
    non_resource_urls: List[str] = field(default_factory=list)
    api_groups: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any, kind: str = "rule") -> "PolicyRule":
        data = _require_mapping(data, kind, "rules[]")
        return cls(
            verbs=_string_list(data, "verbs", kind, "rules[]"),
            resources=_string_list(data, "resources", kind, "rules[]"),
            resource_names=_string_list(data, "resourceNames", kind, "rules[]"),
            non_resource_urls=_string_list(data, "nonResourceURLs", kind, "rules[]"),
            api_groups=_string_list(data, "apiGroups", kind, "rules[]"),
        )


@dataclass
class RoleRecord:
    """A Role (namespaced) or ClusterRole (cluster-scoped) with its rules"""
    identity: NamespacedName
    rules: List[PolicyRule] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def namespace(self) -> str:
        return self.identity.namespace

    @classmethod
    def from_dict(cls, data: Any, kind: str = str(KubernetesConstants.ResourceKind.ROLE)) -> "RoleRecord":
        identity = NamespacedName.from_metadata(data, kind)
        kind = f"{kind} {identity}"
        return cls(
            identity=identity,
            rules=[PolicyRule.from_dict(rule, kind) for rule in _object_list(data, "rules", kind)],
        )


@dataclass
class Subject:
    """A grant recipient listed in a binding"""
    name: str = ""
    namespace: str = ""
    kind: str = ""

    def matches(self, name: str, namespace: str) -> bool:
        """Exact match on name and namespace; an empty namespace is not a wildcard"""
        return self.name == name and self.namespace == namespace

    @classmethod
    def from_dict(cls, data: Any, kind: str = "subject") -> "Subject":
        data = _require_mapping(data, kind, "subjects[]")
        return cls(
            name=_optional_str(data, "name", kind, "subjects[]"),
            namespace=_optional_str(data, "namespace", kind, "subjects[]"),
            kind=_optional_str(data, "kind", kind, "subjects[]"),
        )


@dataclass
class RoleRef:
    """The role a binding points at"""
    name: str
    kind: str = ""
    namespace: str = ""

    @classmethod
    def from_dict(cls, data: Any, kind: str = "roleRef") -> "RoleRef":
        data = _require_mapping(data, kind, "roleRef")
        return cls(
            name=_required_str(data, "name", kind, "roleRef"),
            kind=_optional_str(data, "kind", kind, "roleRef"),
            namespace=_optional_str(data, "namespace", kind, "roleRef"),
        )


@dataclass
class BindingRecord:
    """A RoleBinding (namespaced) or ClusterRoleBinding (cluster-scoped)"""
    identity: NamespacedName
    role_ref: RoleRef
    subjects: List[Subject] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def namespace(self) -> str:
        return self.identity.namespace

    @property
    def role_identity(self) -> NamespacedName:
        """
        Identity of the referenced role.

        An explicit `roleRef.namespace` wins. Otherwise a reference of kind Role
        lives in the binding's own namespace, and anything else is cluster-scoped.
        """
        namespace = self.role_ref.namespace
        if not namespace and self.role_ref.kind == KubernetesConstants.ResourceKind.ROLE:
            namespace = self.identity.namespace
        return NamespacedName(namespace=namespace, name=self.role_ref.name)

    @classmethod
    def from_dict(cls, data: Any, kind: str = str(KubernetesConstants.ResourceKind.ROLE_BINDING)) -> "BindingRecord":
        identity = NamespacedName.from_metadata(data, kind)
        kind = f"{kind} {identity}"
        if "roleRef" not in data:
            raise MalformedRecordError(f"{kind}: missing required field 'roleRef'", kind=kind, field="roleRef")
        return cls(
            identity=identity,
            role_ref=RoleRef.from_dict(data["roleRef"], kind),
            subjects=[Subject.from_dict(subject, kind) for subject in _object_list(data, "subjects", kind)],
        )


@dataclass(frozen=True)
class BindingAndRole:
    """
    One subject match: the binding that grants access and the role it references.

    `role_kind` carries `roleRef.kind` when the record had one; it does not take
    part in equality.
    """
    binding: NamespacedName
    role: NamespacedName
    role_kind: Optional[str] = field(default=None, compare=False)


@dataclass
class PermissionSnapshot:
    """
    The filtered, in-memory copy of all RBAC records used for one resolution pass.

    Mappings keep insertion order, which is the iteration order used when the
    graph is built.
    """
    service_accounts: Dict[str, List[str]] = field(default_factory=dict)
    roles: Dict[str, List[RoleRecord]] = field(default_factory=dict)
    cluster_roles: List[RoleRecord] = field(default_factory=list)
    role_bindings: Dict[str, List[BindingRecord]] = field(default_factory=dict)
    cluster_role_bindings: List[BindingRecord] = field(default_factory=list)


RawOrRole = Union[RoleRecord, Mapping[str, Any]]
RawOrBinding = Union[BindingRecord, Mapping[str, Any]]


def as_role(record: RawOrRole, kind: str = str(KubernetesConstants.ResourceKind.ROLE)) -> RoleRecord:
    """Return a decoded role, decoding raw mappings on the way"""
    if isinstance(record, RoleRecord):
        return record
    if isinstance(record, Mapping) and isinstance(record.get("kind"), str):
        kind = record["kind"]
    return RoleRecord.from_dict(record, kind)


def as_binding(record: RawOrBinding,
               kind: str = str(KubernetesConstants.ResourceKind.ROLE_BINDING)) -> BindingRecord:
    """Return a decoded binding, decoding raw mappings on the way"""
    if isinstance(record, BindingRecord):
        return record
    if isinstance(record, Mapping) and isinstance(record.get("kind"), str):
        kind = record["kind"]
    return BindingRecord.from_dict(record, kind)
