"""
Constants Module

Centralized constants for the rback tool to eliminate magic strings
and improve maintainability.
"""

from enum import Enum, IntEnum


class KubernetesConstants:
    """Kubernetes-related constants"""

    LIST_KIND = "List"

    # Default ignore filter for system-owned (Cluster)Role(Binding)s
    DEFAULT_IGNORED_PREFIXES = "system:"
    NO_IGNORED_PREFIXES = "none"

    class ResourceKind(str, Enum):
        """Object kinds as they appear in the `kind` field of records"""
        SERVICE_ACCOUNT = "ServiceAccount"
        ROLE = "Role"
        CLUSTER_ROLE = "ClusterRole"
        ROLE_BINDING = "RoleBinding"
        CLUSTER_ROLE_BINDING = "ClusterRoleBinding"

        def __str__(self) -> str:
            """Return the kind value"""
            return self.value

    # Normalized CLI resource kind -> canonical name
    KIND_ALIASES = {
        "sa": "serviceaccount",
        "serviceaccounts": "serviceaccount",
    }
    SERVICE_ACCOUNT_RESOURCE = "serviceaccount"


class GraphConstants:
    """Presentation constants for the rendered graph"""

    LEGEND_NAME = "LEGEND"
    LEGEND_KEY_PREFIX = "legend-"
    NAMESPACE_STYLE = "dashed"
    # rules-<ns>/cr/<name> for ClusterRole rules, rules-<ns>/<name> for Role rules
    CLUSTER_ROLE_RULES_SCOPE = "cr/"

    class NodePrefix(str, Enum):
        """Key prefixes identifying the kind of entity a node represents"""
        SERVICE_ACCOUNT = "sa-"
        ROLE = "r-"
        CLUSTER_ROLE = "cr-"
        ROLE_BINDING = "rb-"
        CLUSTER_ROLE_BINDING = "crb-"
        RULES = "rules-"

        def __str__(self) -> str:
            return self.value

    # Node attributes per entity kind
    SERVICE_ACCOUNT_STYLE = {
        "shape": "box",
        "style": "filled",
        "fillcolor": "#2f6de1",
        "fontcolor": "#f0f0f0",
    }
    ROLE_BINDING_STYLE = {
        "shape": "octagon",
        "style": "filled",
        "fillcolor": "#ffcc00",
        "fontcolor": "#030303",
    }
    CLUSTER_ROLE_BINDING_STYLE = {
        "shape": "doubleoctagon",
        "style": "filled",
        "fillcolor": "#ffcc00",
        "fontcolor": "#030303",
    }
    ROLE_STYLE = {
        "shape": "octagon",
        "style": "filled",
        "fillcolor": "#ff9900",
        "fontcolor": "#030303",
    }
    CLUSTER_ROLE_STYLE = {
        "shape": "doubleoctagon",
        "style": "filled",
        "fillcolor": "#ff9900",
        "fontcolor": "#030303",
    }
    RULES_STYLE = {
        "shape": "note",
    }


class FileConstants:
    """File and config related constants"""

    DEFAULT_CONFIG_LOCATIONS = [
        "rback.yaml",
        "~/.rback.yaml",
        "~/.config/rback.yaml",
    ]


class ExitCode(IntEnum):
    """Process exit codes"""
    SUCCESS = 0
    RETRIEVAL_FAILURE = 1
    MALFORMED_RECORD = 2
    CONFIGURATION_ERROR = 3
    INTERRUPTED = 130


class ErrorMessages:
    """Centralized error message templates"""

    class APIError(str, Enum):
        """Kubernetes API error message templates"""
        UNAUTHORIZED = (
            "Unauthorized (401). Verify that your kubeconfig credentials are valid "
            "and not expired."
        )
        FORBIDDEN = (
            "Forbidden (403). Your credentials are valid but cannot {action}. "
            "Listing RBAC objects requires cluster-wide read access."
        )
        NOT_FOUND = "Not found (404) while trying to {action}."
        CONNECTION_FAILED = (
            "Could not reach the Kubernetes API while trying to {action}. "
            "Check cluster connectivity or use --from-file for offline input.\n"
            "Original error: {error}"
        )
        SSL_VERIFICATION_FAILED = (
            "SSL certificate verification failed while trying to {action}. "
            "If the cluster uses self-signed certificates, add the --skip-tls flag."
        )

        def __str__(self) -> str:
            return self.value

    class ConfigError(str, Enum):
        """Configuration-related error message templates"""
        FORMAT_REQUIRES_OUTPUT = "--format requires --output to be set"
        KUBECONFIG_NOT_LOADED = (
            "Could not load cluster configuration from kubeconfig or in-cluster environment: {error}"
        )

        def __str__(self) -> str:
            return self.value
