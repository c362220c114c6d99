"""
Graph Model Builder

Turns a permission snapshot into the graph of identities, bindings, roles and
access rules. Namespaces are visited in the snapshot's insertion order, so the
same snapshot and options always produce the same graph.
"""

import logging
from typing import Optional

from ..core.config import RenderOptions
from ..core.constants import GraphConstants
from ..core.utils import should_ignore
from ..rbac.binding_resolver import lookup_bindings_and_roles
from ..rbac.models import BindingAndRole, PermissionSnapshot
from ..rbac.role_resolver import lookup_role_rules
from .legend import render_legend
from .model import Graph, Node
from .nodes import (
    new_cluster_role_binding_node,
    new_cluster_role_node,
    new_role_binding_node,
    new_role_node,
    new_rules_node,
    new_service_account_node,
)

logger = logging.getLogger(__name__)


class GraphModelBuilder:
    """Builds the RBAC graph for one snapshot"""

    def __init__(self, options: Optional[RenderOptions] = None, legend: bool = True):
        """
        Initialize the builder

        Args:
            options: Render options (defaults to RenderOptions())
            legend: Whether to add the legend cluster
        """
        self.options = options or RenderOptions()
        self.legend = legend

    def build(self, snapshot: PermissionSnapshot) -> Graph:
        """
        Build the graph.

        Args:
            snapshot: Permission snapshot

        Returns:
            Graph: The complete graph model

        Raises:
            MalformedRecordError: If any binding or role cannot be resolved;
                no partial graph is returned
        """
        g = Graph(name="rback")
        # global rank instead of per-subgraph, keeps access rules at the bottom
        g.attr("newrank", "true")
        if self.legend:
            render_legend(g, self.options.render_bindings, self.options.render_rules)

        for namespace, service_accounts in snapshot.service_accounts.items():
            gns = g.subgraph(namespace)
            gns.attr("label", namespace)
            gns.attr("style", GraphConstants.NAMESPACE_STYLE)

            for service_account in service_accounts:
                sa_node = new_service_account_node(gns, service_account)

                # cluster-scoped bindings are drawn outside any namespace
                for match in lookup_bindings_and_roles(snapshot.cluster_role_bindings,
                                                       service_account, namespace):
                    self.render_role(g, match, sa_node, snapshot)

                for match in lookup_bindings_and_roles(snapshot.role_bindings.get(namespace),
                                                       service_account, namespace):
                    self.render_role(gns, match, sa_node, snapshot)

        logger.info(f"Graph built: {len(g.node_keys())} node(s), {len(g.edge_set())} edge(s)")
        return g

    def render_role(self, g: Graph, match: BindingAndRole, sa_node: Node,
                    snapshot: PermissionSnapshot) -> None:
        """
        Draw one grant: identity -> (binding ->) role (-> rules).

        Args:
            g: Graph or namespace subgraph to draw in
            match: Binding and the role it references
            sa_node: Node of the identity being granted access
            snapshot: Snapshot used to resolve the role's rules
        """
        binding, role = match.binding, match.role
        if (should_ignore(binding.name, self.options.ignored_prefixes)
                or should_ignore(role.name, self.options.ignored_prefixes)):
            logger.debug(f"Skipping ignored grant {binding} -> {role}")
            return

        if role.is_cluster_scoped:
            role_node = new_cluster_role_node(g, binding.namespace, role.name)
        else:
            role_node = new_role_node(g, binding.namespace, role.name)

        if self.options.render_bindings:
            if binding.is_cluster_scoped:
                binding_node = new_cluster_role_binding_node(g, binding.name)
            else:
                binding_node = new_role_binding_node(g, binding.name)
            g.edge(sa_node, binding_node)
            g.edge(binding_node, role_node)
        else:
            g.edge(sa_node, role_node, binding.name)

        if self.options.render_rules:
            rules = lookup_role_rules(binding.namespace, role.name, snapshot, match.role_kind)
            if rules:
                rules_node = new_rules_node(g, binding.namespace, role.name, rules,
                                            cluster_role=role.is_cluster_scoped)
                g.edge(role_node, rules_node)


def build_graph(snapshot: PermissionSnapshot, options: Optional[RenderOptions] = None) -> Graph:
    """Build the graph for `snapshot` with `options`"""
    return GraphModelBuilder(options).build(snapshot)
