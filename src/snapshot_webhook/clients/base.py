"""Kubernetes access for the webhook: cluster-wide reads of snapshot CRDs."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from kubernetes import client, config
from kubernetes.client import ApiException
from kubernetes.dynamic import DynamicClient
from kubernetes.dynamic.resource import Resource, ResourceField

from snapshot_webhook.config import SERVICE_ACCOUNT_TOKEN_PATH, AuthMode, WebhookConfig
from snapshot_webhook.utils.errors import AuthenticationError, WebhookError

logger = logging.getLogger(__name__)


class CRDDefinition:
    """Group, version and names of a cluster-scoped custom resource."""

    def __init__(self, group: str, version: str, plural: str, kind: str) -> None:
        self.group = group
        self.version = version
        self.plural = plural
        self.kind = kind

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}"

    def __repr__(self) -> str:
        return f"CRDDefinition({self.api_version}, {self.plural})"


def build_api_client(cfg: WebhookConfig) -> client.ApiClient:
    """Create an API client for the configured authentication mode.

    In auto mode the pod's service account wins over any kubeconfig.
    """
    if cfg.auth_mode == AuthMode.TOKEN:
        if not (cfg.api_server and cfg.api_token):
            raise AuthenticationError("token auth needs both api_server and api_token")
        return client.ApiClient(
            client.Configuration(
                host=cfg.api_server,
                api_key={"authorization": f"Bearer {cfg.api_token}"},
            )
        )

    if cfg.auth_mode == AuthMode.AUTO and SERVICE_ACCOUNT_TOKEN_PATH.exists():
        logger.info("Authenticating with the pod service account")
        configuration = client.Configuration()
        config.load_incluster_config(client_configuration=configuration)
        return client.ApiClient(configuration)

    kubeconfig = cfg.effective_kubeconfig_path
    if not kubeconfig.exists():
        raise AuthenticationError(f"Kubeconfig not found: {kubeconfig}")
    logger.info(f"Authenticating with kubeconfig {kubeconfig}")
    return config.new_client_from_config(
        config_file=str(kubeconfig),
        context=cfg.kubeconfig_context,
    )


class K8sClient:
    """Reads cluster-scoped custom resources through the dynamic client.

    The resources to read are discovered once in connect(), so request
    threads only ever look them up.
    """

    def __init__(self, config_obj: WebhookConfig) -> None:
        self._config = config_obj
        self._api_client: client.ApiClient | None = None
        self._resources: dict[str, Resource] = {}

    def connect(self, *crds: CRDDefinition) -> None:
        """Authenticate and discover the API resources for ``crds``."""
        try:
            self._api_client = build_api_client(self._config)
            dynamic = DynamicClient(self._api_client)
            self._resources = {
                crd.plural: dynamic.resources.get(api_version=crd.api_version, kind=crd.kind)
                for crd in crds
            }
        except AuthenticationError:
            raise
        except Exception as e:
            raise AuthenticationError(f"Failed to connect to Kubernetes API: {e}") from e
        logger.info(f"Connected to Kubernetes API, watching {sorted(self._resources)}")

    def disconnect(self) -> None:
        if self._api_client:
            self._api_client.close()
            self._api_client = None
            self._resources = {}
            logger.info("Disconnected from Kubernetes API")

    def list_cluster(self, crd: CRDDefinition) -> list[ResourceField]:
        """List every object of ``crd`` across the cluster."""
        resource = self._resources.get(crd.plural)
        if resource is None:
            raise WebhookError(f"{crd.kind} was not discovered. Call connect() first.")
        try:
            result = resource.get()
        except ApiException as e:
            raise WebhookError(f"Failed to list {crd.kind}: {e.reason}") from e
        return list(result.items)


@contextmanager
def get_k8s_client(
    config_obj: WebhookConfig,
    *crds: CRDDefinition,
) -> Generator[K8sClient, None, None]:
    """Connected client for ``crds``, disconnected on exit."""
    k8s_client = K8sClient(config_obj)
    k8s_client.connect(*crds)
    try:
        yield k8s_client
    finally:
        k8s_client.disconnect()
