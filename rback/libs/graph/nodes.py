"""
Node Factories

Get-or-create helpers for each node kind. Keys are derived from kind, scope
and name; `key_prefix` lets the legend use a separate key space.
"""

from ..core.constants import GraphConstants
from .model import Graph, Node

Prefix = GraphConstants.NodePrefix


def new_service_account_node(g: Graph, name: str, key_prefix: str = "") -> Node:
    return g.node(f"{key_prefix}{Prefix.SERVICE_ACCOUNT}{name}",
                  label=name, **GraphConstants.SERVICE_ACCOUNT_STYLE)


def new_role_binding_node(g: Graph, name: str, key_prefix: str = "") -> Node:
    return g.node(f"{key_prefix}{Prefix.ROLE_BINDING}{name}",
                  label=name, **GraphConstants.ROLE_BINDING_STYLE)


def new_cluster_role_binding_node(g: Graph, name: str, key_prefix: str = "") -> Node:
    return g.node(f"{key_prefix}{Prefix.CLUSTER_ROLE_BINDING}{name}",
                  label=name, **GraphConstants.CLUSTER_ROLE_BINDING_STYLE)


def new_role_node(g: Graph, namespace: str, name: str, key_prefix: str = "") -> Node:
    return g.node(f"{key_prefix}{Prefix.ROLE}{namespace}/{name}",
                  label=name, **GraphConstants.ROLE_STYLE)


def new_cluster_role_node(g: Graph, namespace: str, name: str, key_prefix: str = "") -> Node:
    """ClusterRole node; `namespace` is the binding's, so a locally bound ClusterRole gets its own node"""
    return g.node(f"{key_prefix}{Prefix.CLUSTER_ROLE}{namespace}/{name}",
                  label=name, **GraphConstants.CLUSTER_ROLE_STYLE)


def new_rules_node(g: Graph, namespace: str, role_name: str, rules: str, key_prefix: str = "",
                   cluster_role: bool = False) -> Node:
    """
    Rules node; the label keeps the raw newline-separated rule lines.

    ClusterRole rules get their own key so a Role and a ClusterRole of the
    same name bound in one namespace never share a rules node.
    """
    scope = f"{namespace}/{GraphConstants.CLUSTER_ROLE_RULES_SCOPE}" if cluster_role else f"{namespace}/"
    return g.node(f"{key_prefix}{Prefix.RULES}{scope}{role_name}",
                  label=rules, **GraphConstants.RULES_STYLE)
