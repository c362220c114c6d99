"""
Legend

Static example subgraph explaining the node and edge vocabulary. It is built
from fixed labels only and never looks at the snapshot; its node keys use a
separate prefix so they cannot collide with real entities.
"""

from ..core.constants import GraphConstants
from .model import Graph
from .nodes import (
    new_cluster_role_binding_node,
    new_cluster_role_node,
    new_role_binding_node,
    new_role_node,
    new_rules_node,
    new_service_account_node,
)

PREFIX = GraphConstants.LEGEND_KEY_PREFIX
EXAMPLE_NAMESPACE = "ns"


def render_legend(g: Graph, render_bindings: bool = True, render_rules: bool = True) -> Graph:
    """
    Add the legend cluster to `g`.

    Args:
        g: Root graph
        render_bindings: Show bindings as nodes (as the real graph does)
        render_rules: Show example rules nodes

    Returns:
        Graph: The legend subgraph
    """
    legend = g.subgraph(GraphConstants.LEGEND_NAME)
    legend.attr("label", GraphConstants.LEGEND_NAME)

    namespace = legend.subgraph("Namespace")
    namespace.attr("label", "Namespace")
    namespace.attr("style", GraphConstants.NAMESPACE_STYLE)

    sa = new_service_account_node(namespace, "ServiceAccount", PREFIX)
    role = new_role_node(namespace, EXAMPLE_NAMESPACE, "Role", PREFIX)
    # ClusterRole bound by a (namespaced!) RoleBinding
    cluster_role_bound_locally = new_cluster_role_node(namespace, EXAMPLE_NAMESPACE, "ClusterRole", PREFIX)
    cluster_role = new_cluster_role_node(legend, "", "ClusterRole", PREFIX)

    if render_bindings:
        role_binding = new_role_binding_node(namespace, "RoleBinding", PREFIX)
        namespace.edge(sa, role_binding)
        namespace.edge(role_binding, role)

        role_binding_to_cluster_role = new_role_binding_node(namespace, "RoleBinding-to-ClusterRole", PREFIX)
        role_binding_to_cluster_role.attributes["label"] = "RoleBinding"
        namespace.edge(sa, role_binding_to_cluster_role)
        namespace.edge(role_binding_to_cluster_role, cluster_role_bound_locally)

        cluster_role_binding = new_cluster_role_binding_node(legend, "ClusterRoleBinding", PREFIX)
        legend.edge(sa, cluster_role_binding)
        legend.edge(cluster_role_binding, cluster_role)
    else:
        legend.edge(sa, role, "RoleBinding")
        legend.edge(sa, cluster_role, "ClusterRoleBinding")
        legend.edge(sa, cluster_role_bound_locally, "RoleBinding")

    if render_rules:
        namespace_rules = new_rules_node(namespace, EXAMPLE_NAMESPACE, "Role",
                                         "Namespace-scoped\naccess rules", PREFIX)
        legend.edge(role, namespace_rules)

        namespace_rules_from_cluster_role = new_rules_node(namespace, EXAMPLE_NAMESPACE, "ClusterRole",
                                                           "Namespace-scoped\naccess rules", PREFIX,
                                                           cluster_role=True)
        legend.edge(cluster_role_bound_locally, namespace_rules_from_cluster_role)

        cluster_rules = new_rules_node(legend, "", "ClusterRole", "Cluster-scoped\naccess rules", PREFIX,
                                       cluster_role=True)
        legend.edge(cluster_role, cluster_rules)

    return legend
