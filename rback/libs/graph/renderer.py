"""
DOT Renderer

Renders the graph model as Graphviz DOT source using the graphviz package,
and optionally to an image through the Graphviz binaries.
"""

import logging
import subprocess
from pathlib import Path

import graphviz

from ..core.exceptions import ConfigurationError, RbackError
from .model import Graph, Node

logger = logging.getLogger(__name__)


def dot_id(key: str) -> str:
    """Node key to DOT ID; ':' would otherwise be read as a port separator in edges"""
    return key.replace("%", "%25").replace(":", "%3A")


def dot_label(text: str) -> str:
    """Escape a label and left-justify each line"""
    return text.replace("\\", "\\\\").replace("\n", "\\l")


class DotRenderer:
    """Renders Graph models to DOT"""

    def to_digraph(self, graph: Graph) -> graphviz.Digraph:
        """
        Convert the graph model to a graphviz.Digraph.

        Args:
            graph: Root graph model

        Returns:
            graphviz.Digraph with nested cluster subgraphs
        """
        dot = graphviz.Digraph(name=graph.name or None)
        self._populate(dot, graph)
        return dot

    def _populate(self, dot: graphviz.Digraph, graph: Graph) -> None:
        if graph.attributes:
            dot.attr(**graph.attributes)

        for node in graph.nodes.values():
            dot.node(dot_id(node.key), **self._node_attributes(node))

        for name, subgraph in graph.subgraphs.items():
            child = graphviz.Digraph(name=f"cluster_{name}" if subgraph.cluster else name)
            self._populate(child, subgraph)
            dot.subgraph(child)

        for edge in graph.edges:
            dot.edge(dot_id(edge.tail), dot_id(edge.head), label=edge.label)

    @staticmethod
    def _node_attributes(node: Node) -> dict:
        attributes = dict(node.attributes)
        if "label" in attributes:
            attributes["label"] = dot_label(attributes["label"])
        return attributes

    def render(self, graph: Graph) -> str:
        """Render the graph model as DOT source"""
        return self.to_digraph(graph).source

    def render_to_file(self, graph: Graph, path: str, fmt: str = None) -> str:
        """
        Write the graph to `path`, as DOT source or as an image in `fmt`.

        Args:
            graph: Root graph model
            path: Output file path
            fmt: Graphviz output format (e.g. "svg", "png"); None writes DOT source

        Returns:
            str: Path of the written file

        Raises:
            ConfigurationError: If the Graphviz binaries are not installed
            RbackError: If Graphviz fails to render
        """
        output = Path(path).expanduser()
        if not fmt:
            output.write_text(self.render(graph), encoding="utf-8")
            logger.info(f"Wrote DOT graph to {output}")
            return str(output)

        try:
            rendered = self.to_digraph(graph).render(outfile=str(output), format=fmt, cleanup=True)
        except graphviz.ExecutableNotFound as e:
            raise ConfigurationError(
                f"Graphviz 'dot' executable not found; install Graphviz or omit --format: {e}"
            ) from e
        except subprocess.CalledProcessError as e:
            raise RbackError(f"Graphviz failed to render {fmt} output: {e}") from e

        logger.info(f"Wrote {fmt} graph to {rendered}")
        return rendered
