"""
Main Application

Orchestrates one run: collect the permission snapshot from a record store,
build the graph model and render it.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .core import KubernetesAuth, ConfigManager, RenderOptions, setup_logging
from .core.constants import ErrorMessages, ExitCode, KubernetesConstants
from .core.exceptions import ConfigurationError, MalformedRecordError, RbackError, RetrievalError
from .core.protocols import GraphRenderer, RecordStore
from .core.utils import parse_ignored_prefixes
from .graph import DotRenderer, Graph, GraphModelBuilder
from .rbac import ClusterRecordStore, FileRecordStore, PermissionCollector

logger = logging.getLogger(__name__)


class RbackApplication:
    """Main application orchestrator for the rback tool"""

    def __init__(
        self,
        options: RenderOptions,
        store: Optional[RecordStore] = None,
        renderer: Optional[GraphRenderer] = None,
        auth_provider: Optional[KubernetesAuth] = None,
    ):
        """
        Initialize the application with dependency injection

        Args:
            options: Render options for this run
            store: Record store (defaults to a ClusterRecordStore built from auth_provider)
            renderer: Graph renderer (defaults to DotRenderer)
            auth_provider: Cluster authentication (defaults to KubernetesAuth)
        """
        self.options = options
        self._store = store
        self.renderer = renderer or DotRenderer()
        self.auth = auth_provider or KubernetesAuth()

    @property
    def store(self) -> RecordStore:
        """Record store, connecting to the cluster on first use"""
        if self._store is None:
            api_client, core_api, rbac_api = self.auth.get_kubernetes_clients()
            self._store = ClusterRecordStore(api_client, core_api, rbac_api)
        return self._store

    def build_graph(self) -> Graph:
        """
        Collect the snapshot and build the graph model

        Raises:
            RetrievalError: If records cannot be retrieved
            MalformedRecordError: If a record cannot be decoded or resolved
        """
        snapshot = PermissionCollector(self.store, self.options).collect()
        return GraphModelBuilder(self.options).build(snapshot)

    def run(self) -> str:
        """
        Build and render the graph

        Returns:
            str: Rendered graph description
        """
        return self.renderer.render(self.build_graph())


def create_application(options: RenderOptions, from_file: Optional[str] = None,
                       kubeconfig: Optional[str] = None, context: Optional[str] = None,
                       skip_tls: bool = False) -> RbackApplication:
    """
    Factory function to create RbackApplication with default dependencies

    Args:
        options: Render options
        from_file: Read records from this file instead of a live cluster
        kubeconfig: Kubeconfig path for cluster access
        context: Kubeconfig context for cluster access
        skip_tls: Whether to skip TLS verification

    Returns:
        RbackApplication: Configured application
    """
    store = FileRecordStore(from_file) if from_file else None
    auth = KubernetesAuth(kubeconfig=kubeconfig, context=context, skip_tls=skip_tls)
    return RbackApplication(options, store=store, auth_provider=auth)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser"""
    parser = argparse.ArgumentParser(
        prog='rback',
        description='rback - visualize Kubernetes RBAC as a Graphviz graph',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rback | dot -Tpng > rbac.png
  rback -n kube-public
  rback sa my-sa -n my-namespace --no-render-rules
  rback --ignore-prefixes none --from-file cluster-rbac.yaml --output rbac.dot
        """
    )

    parser.add_argument('resource_kind', nargs='?', default='',
                        help='Resource kind to scope discovery to (e.g. sa, serviceaccounts)')
    parser.add_argument('resource_names', nargs='*', default=[],
                        help='Resource names to scope discovery to')

    render_group = parser.add_argument_group('rendering')
    render_group.add_argument('--render-bindings', action=argparse.BooleanOptionalAction, default=True,
                              help='Whether to render (Cluster)RoleBindings as graph nodes')
    render_group.add_argument('--render-rules', action=argparse.BooleanOptionalAction, default=True,
                              help='Whether to render RBAC rules (e.g. "get pods") or not')
    render_group.add_argument('-n', '--namespace', default='',
                              help='The namespace to render (default: all namespaces)')
    render_group.add_argument('--ignore-prefixes', default=KubernetesConstants.DEFAULT_IGNORED_PREFIXES,
                              help="Comma-delimited list of (Cluster)Role(Binding) prefixes to ignore "
                                   "('none' to not ignore anything)")

    source_group = parser.add_argument_group('record source')
    source_group.add_argument('--from-file', metavar='PATH',
                              help='Read RBAC objects from a JSON/YAML dump instead of the cluster')
    source_group.add_argument('--kubeconfig', help='Path to the kubeconfig file')
    source_group.add_argument('--context', help='Kubeconfig context to use')
    source_group.add_argument('--skip-tls', action='store_true',
                              help='Skip TLS verification for insecure requests')

    output_group = parser.add_argument_group('output')
    output_group.add_argument('--output', metavar='PATH', help='Write the graph to a file instead of stdout')
    output_group.add_argument('--format',
                              help='Render an image in this Graphviz format (e.g. svg, png); requires --output')

    parser.add_argument('--config', help='Configuration file path')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    return parser


def options_from_args(args: argparse.Namespace) -> RenderOptions:
    """Build RenderOptions from parsed arguments"""
    return RenderOptions(
        render_bindings=args.render_bindings,
        render_rules=args.render_rules,
        namespace=args.namespace or "",
        ignored_prefixes=parse_ignored_prefixes(args.ignore_prefixes),
        resource_kind=args.resource_kind or "",
        resource_names=list(args.resource_names or []),
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point

    Returns:
        int: Process exit code
    """
    # Find --config first so the file can provide defaults for the real parser
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument('--config')
    pre_args, _ = pre_parser.parse_known_args(argv)

    parser = create_argument_parser()
    try:
        config_manager = ConfigManager(custom_config_path=pre_args.config)
        config_manager.load_config()
        parser.set_defaults(**config_manager.get_defaults_for_argparse())
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return ExitCode.CONFIGURATION_ERROR

    args = parser.parse_args(argv)
    setup_logging(args.debug)

    try:
        if args.format and not args.output:
            raise ConfigurationError(str(ErrorMessages.ConfigError.FORMAT_REQUIRES_OUTPUT))

        options = options_from_args(args)
        app = create_application(options, from_file=args.from_file, kubeconfig=args.kubeconfig,
                                 context=args.context, skip_tls=args.skip_tls)

        if args.output:
            app.renderer.render_to_file(app.build_graph(), args.output, args.format)
        else:
            print(app.run())
        return ExitCode.SUCCESS

    except RetrievalError as e:
        logger.error(f"Can't query permissions: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return ExitCode.RETRIEVAL_FAILURE
    except MalformedRecordError as e:
        logger.error(f"Can't resolve bindings and roles: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return ExitCode.MALFORMED_RECORD
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return ExitCode.CONFIGURATION_ERROR
    except RbackError as e:
        logger.error(f"Unexpected error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return ExitCode.RETRIEVAL_FAILURE
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return ExitCode.INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
