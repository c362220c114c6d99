"""
Configuration Management

Handles render options and loading configuration files for the rback tool.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .constants import FileConstants, KubernetesConstants
from .exceptions import ConfigurationError
from .utils import normalize_kind, parse_ignored_prefixes

logger = logging.getLogger(__name__)


@dataclass
class RenderOptions:
    """
    Options controlling snapshot collection and graph construction.

    Attributes:
        render_bindings: Show (Cluster)RoleBindings as nodes instead of edge labels
        render_rules: Attach a rules node under each role
        namespace: Restrict ServiceAccount discovery to one namespace (empty = all)
        ignored_prefixes: (Cluster)Role(Binding) name prefixes excluded at ingestion
        resource_kind: Normalized resource kind given on the command line
        resource_names: Resource names given on the command line
    """
    render_bindings: bool = True
    render_rules: bool = True
    namespace: str = ""
    ignored_prefixes: List[str] = field(
        default_factory=lambda: parse_ignored_prefixes(KubernetesConstants.DEFAULT_IGNORED_PREFIXES)
    )
    resource_kind: str = ""
    resource_names: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.resource_kind = normalize_kind(self.resource_kind)

    @property
    def service_account_names(self) -> List[str]:
        """ServiceAccount names that scope discovery, if the resource kind selects them"""
        if self.resource_kind == KubernetesConstants.SERVICE_ACCOUNT_RESOURCE:
            return list(self.resource_names)
        return []


class ConfigManager:
    """Manages configuration file loading and validation"""

    # Configuration schema - defines expected structure and types
    CONFIG_SCHEMA = {
        'render': {
            'type': dict,
            'required': False,
            'fields': {
                'bindings': {'type': bool, 'required': False},
                'rules': {'type': bool, 'required': False},
            }
        },
        'filter': {
            'type': dict,
            'required': False,
            'fields': {
                'namespace': {'type': str, 'required': False},
                'ignore_prefixes': {'type': (str, list), 'required': False},
            }
        },
        'cluster': {
            'type': dict,
            'required': False,
            'fields': {
                'kubeconfig': {'type': str, 'required': False},
                'context': {'type': str, 'required': False},
                'skip_tls': {'type': bool, 'required': False},
            }
        },
        'global': {
            'type': dict,
            'required': False,
            'fields': {
                'debug': {'type': bool, 'required': False},
            }
        },
    }

    def __init__(self, custom_config_path: Optional[str] = None):
        """
        Initialize configuration manager

        Args:
            custom_config_path: Optional explicit path to a configuration file
        """
        self.custom_config_path = custom_config_path
        self.config_data: Dict[str, Any] = {}
        self.config_file_path: Optional[str] = None

    def load_config(self) -> Dict[str, Any]:
        """
        Load configuration from the explicit path or the first default location found

        Returns:
            Dict containing configuration data (empty when no file exists)

        Raises:
            ConfigurationError: If the file cannot be read or is invalid
        """
        config_path = self._find_config_file()
        if not config_path:
            logger.debug("No configuration file found")
            return {}

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration from {config_path}: {e}")

        # Expand environment variables in config content
        config_content = os.path.expandvars(config_content)

        try:
            self.config_data = yaml.safe_load(config_content) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file {config_path}: {e}")

        self.config_file_path = config_path
        self._validate_config()
        logger.info(f"Loaded configuration from {config_path}")
        return self.config_data

    def _find_config_file(self) -> Optional[str]:
        """
        Find the configuration file to use.

        Returns:
            Path to config file or None if not found

        Raises:
            ConfigurationError: If an explicit path was given but does not exist
        """
        if self.custom_config_path:
            custom_path = Path(self.custom_config_path).expanduser()
            if not custom_path.is_file():
                raise ConfigurationError(f"Configuration file not found: {self.custom_config_path}")
            return str(custom_path)

        for location in FileConstants.DEFAULT_CONFIG_LOCATIONS:
            expanded_path = Path(location).expanduser()
            if expanded_path.is_file():
                return str(expanded_path)

        return None

    def _validate_config(self) -> None:
        """
        Validate configuration structure and values

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not isinstance(self.config_data, dict):
            raise ConfigurationError("Configuration must be a dictionary")

        self._validate_against_schema(self.config_data, self.CONFIG_SCHEMA, "config")

    def _validate_against_schema(self, data: Dict[str, Any], schema: Dict[str, Any], path: str = "") -> None:
        """
        Validate data against schema definition

        Args:
            data: Data to validate
            schema: Schema definition
            path: Current path for error reporting

        Raises:
            ConfigurationError: If data doesn't match schema
        """
        for key in data:
            if key not in schema:
                logger.warning(f"Unknown configuration key ignored: {path}.{key}")

        for key, field_schema in schema.items():
            current_path = f"{path}.{key}" if path else key

            if key in data:
                value = data[key]

                # Skip None values for optional fields
                if value is None and not field_schema.get('required', False):
                    continue

                expected_type = field_schema['type']
                if not isinstance(value, expected_type):
                    if isinstance(expected_type, tuple):
                        type_name = " or ".join(t.__name__ for t in expected_type)
                    else:
                        type_name = expected_type.__name__
                    raise ConfigurationError(f"{current_path} must be a {type_name}")

                # Recursively validate nested dictionaries
                if expected_type == dict and 'fields' in field_schema:
                    self._validate_against_schema(value, field_schema['fields'], current_path)

            elif field_schema.get('required', False):
                raise ConfigurationError(f"Required field {current_path} is missing")

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get specific configuration section

        Args:
            section: Section name (e.g., 'render', 'cluster')

        Returns:
            Dict containing section data, empty dict if section doesn't exist
        """
        return self.config_data.get(section) or {}

    def get_defaults_for_argparse(self) -> Dict[str, Any]:
        """
        Get configuration values formatted for argparse defaults.

        Returns:
            Dictionary suitable for argparse.set_defaults()
        """
        defaults = {}

        render = self.get_section('render')
        if render.get('bindings') is not None:
            defaults['render_bindings'] = render['bindings']
        if render.get('rules') is not None:
            defaults['render_rules'] = render['rules']

        filters = self.get_section('filter')
        if filters.get('namespace'):
            defaults['namespace'] = filters['namespace']
        ignore_prefixes = filters.get('ignore_prefixes')
        if isinstance(ignore_prefixes, list):
            defaults['ignore_prefixes'] = ",".join(ignore_prefixes) or KubernetesConstants.NO_IGNORED_PREFIXES
        elif ignore_prefixes is not None:
            defaults['ignore_prefixes'] = ignore_prefixes

        cluster = self.get_section('cluster')
        for key in ('kubeconfig', 'context'):
            if cluster.get(key):
                defaults[key] = cluster[key]
        if cluster.get('skip_tls') is not None:
            defaults['skip_tls'] = cluster['skip_tls']

        global_section = self.get_section('global')
        if global_section.get('debug') is not None:
            defaults['debug'] = global_section['debug']

        return defaults
