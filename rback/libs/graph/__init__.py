"""
Graph Libraries

Graph model, builder, legend and DOT renderer.
"""

from .model import Graph, Node, Edge
from .builder import GraphModelBuilder, build_graph
from .legend import render_legend
from .renderer import DotRenderer

__all__ = [
    'Graph',
    'Node',
    'Edge',
    'GraphModelBuilder',
    'build_graph',
    'render_legend',
    'DotRenderer',
]
