"""
Protocols

Structural interfaces for the collaborators the application is wired with,
so that cluster access and rendering can be swapped out in tests.
"""

from typing import Any, Dict, List, Protocol, Sequence


class RecordStore(Protocol):
    """Supplies raw RBAC records, one call per resource kind"""

    def get_service_accounts(self, namespace: str = "", names: Sequence[str] = ()) -> List[Dict[str, Any]]:
        ...

    def list_roles(self) -> List[Dict[str, Any]]:
        ...

    def list_role_bindings(self) -> List[Dict[str, Any]]:
        ...

    def list_cluster_roles(self) -> List[Dict[str, Any]]:
        ...

    def list_cluster_role_bindings(self) -> List[Dict[str, Any]]:
        ...


class GraphRenderer(Protocol):
    """Turns an abstract graph into a textual graph description"""

    def render(self, graph: Any) -> str:
        ...
