"""
Authentication Module

Handles Kubernetes cluster authentication and API client construction.
"""

import logging
import os
from typing import Optional, Tuple

from decouple import config as env_config
from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from .constants import ErrorMessages
from .exceptions import AuthenticationError
from .utils import disable_ssl_warnings

logger = logging.getLogger(__name__)


class KubernetesAuth:
    """Handles kubeconfig / in-cluster discovery for the Kubernetes API"""

    def __init__(self, kubeconfig: Optional[str] = None, context: Optional[str] = None,
                 skip_tls: bool = False):
        """
        Initialize Kubernetes authentication handler

        Args:
            kubeconfig: Path to a kubeconfig file (falls back to RBACK_KUBECONFIG, then the client default)
            context: Kubeconfig context to use (falls back to RBACK_CONTEXT, then the current context)
            skip_tls: Whether to skip TLS verification for requests
        """
        self.kubeconfig = kubeconfig or env_config('RBACK_KUBECONFIG', default=None)
        self.context = context or env_config('RBACK_CONTEXT', default=None)
        self.skip_tls = skip_tls
        self.api_client: Optional[client.ApiClient] = None

    def configure_auth(self) -> client.ApiClient:
        """
        Load cluster configuration, preferring kubeconfig over in-cluster config

        Returns:
            client.ApiClient: Configured API client

        Raises:
            AuthenticationError: If no usable configuration could be loaded
        """
        configuration = client.Configuration()

        try:
            config.load_kube_config(
                config_file=os.path.expanduser(self.kubeconfig) if self.kubeconfig else None,
                context=self.context,
                client_configuration=configuration,
            )
            logger.info("Loaded cluster configuration from kubeconfig"
                        + (f" (context: {self.context})" if self.context else ""))
        except (ConfigException, OSError) as kube_error:
            logger.debug(f"Kubeconfig not usable: {kube_error}")
            try:
                config.load_incluster_config(client_configuration=configuration)
                logger.info("Loaded in-cluster configuration")
            except ConfigException as incluster_error:
                raise AuthenticationError(
                    ErrorMessages.ConfigError.KUBECONFIG_NOT_LOADED.format(error=kube_error)
                ) from incluster_error

        if self.skip_tls:
            configuration.verify_ssl = False
            configuration.ssl_ca_cert = None
            disable_ssl_warnings()

        self.api_client = client.ApiClient(configuration)
        return self.api_client

    def get_kubernetes_clients(self) -> Tuple[client.ApiClient, client.CoreV1Api, client.RbacAuthorizationV1Api]:
        """
        Get the API clients used to read RBAC state

        Returns:
            Tuple of (ApiClient, CoreV1Api, RbacAuthorizationV1Api)
        """
        api_client = self.api_client or self.configure_auth()
        return api_client, client.CoreV1Api(api_client), client.RbacAuthorizationV1Api(api_client)
