"""
Graph Model

A small renderer-independent directed graph: nodes with attributes, optionally
labeled edges and nested groupings (clusters).

The root graph owns a registry from node key to node. Asking any scope for a
key that already exists returns the existing node, so a node lives in the
scope that declared it first, and repeated references collapse to one node.
Edges are deduplicated over the whole tree by (tail, head, label).
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple, Union


@dataclass
class Node:
    """A graph node; `scope` is the name of the (sub)graph that declared it"""
    key: str
    attributes: Dict[str, str] = field(default_factory=dict)
    scope: str = ""

    @property
    def label(self) -> str:
        return self.attributes.get("label", self.key)


@dataclass(frozen=True)
class Edge:
    """A directed edge between two node keys"""
    tail: str
    head: str
    label: Optional[str] = None


NodeRef = Union[Node, str]


class Graph:
    """Directed graph or nested subgraph"""

    def __init__(self, name: str = "", cluster: bool = False, parent: Optional["Graph"] = None):
        self.name = name
        self.cluster = cluster
        self.parent = parent
        self.attributes: Dict[str, str] = {}
        self.nodes: Dict[str, Node] = {}
        self.edges: List[Edge] = []
        self.subgraphs: Dict[str, "Graph"] = {}

        if parent is None:
            self._registry: Dict[str, Node] = {}
            self._edge_index: Set[Edge] = set()
            self._edge_order: List[Edge] = []

    @property
    def root(self) -> "Graph":
        graph = self
        while graph.parent is not None:
            graph = graph.parent
        return graph

    def attr(self, key: str, value: str) -> "Graph":
        self.attributes[key] = value
        return self

    def subgraph(self, name: str, cluster: bool = True) -> "Graph":
        """Get or create a direct subgraph of this graph"""
        if name not in self.subgraphs:
            self.subgraphs[name] = Graph(name=name, cluster=cluster, parent=self)
        return self.subgraphs[name]

    def node(self, key: str, **attributes: str) -> Node:
        """
        Get or create the node with this key.

        Attributes only apply on creation; an existing node is returned as is,
        wherever it was declared.
        """
        registry = self.root._registry
        existing = registry.get(key)
        if existing is not None:
            return existing
        node = Node(key=key, attributes=dict(attributes), scope=self.name)
        registry[key] = node
        self.nodes[key] = node
        return node

    def has_node(self, key: str) -> bool:
        return key in self.root._registry

    def get_node(self, key: str) -> Node:
        return self.root._registry[key]

    def edge(self, tail: NodeRef, head: NodeRef, label: Optional[str] = None) -> Edge:
        """
        Add a directed edge in this scope unless an identical edge already exists.

        Raises:
            KeyError: If either endpoint is not a known node
        """
        tail_key = tail.key if isinstance(tail, Node) else tail
        head_key = head.key if isinstance(head, Node) else head
        root = self.root
        for key in (tail_key, head_key):
            if key not in root._registry:
                raise KeyError(f"Unknown node: {key}")

        edge = Edge(tail=tail_key, head=head_key, label=label or None)
        if edge not in root._edge_index:
            root._edge_index.add(edge)
            root._edge_order.append(edge)
            self.edges.append(edge)
        return edge

    def iter_nodes(self) -> Iterator[Node]:
        """All nodes of the whole tree, in creation order"""
        return iter(self.root._registry.values())

    def iter_edges(self) -> Iterator[Edge]:
        """All edges of the whole tree, in creation order"""
        return iter(self.root._edge_order)

    def node_keys(self) -> Set[str]:
        return set(self.root._registry)

    def edge_set(self) -> Set[Tuple[str, str, Optional[str]]]:
        return {(edge.tail, edge.head, edge.label) for edge in self.root._edge_order}
