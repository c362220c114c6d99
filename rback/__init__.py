"""
rback

Visualizes Kubernetes RBAC: which ServiceAccounts are granted which roles,
through which bindings, with which access rules, as a Graphviz graph.
"""

__version__ = "1.0.0"

from .libs import RbackApplication, GraphModelBuilder, DotRenderer, RenderOptions, main

__all__ = [
    'RbackApplication',
    'GraphModelBuilder',
    'DotRenderer',
    'RenderOptions',
    'main'
]
