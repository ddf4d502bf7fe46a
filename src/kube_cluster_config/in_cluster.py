"""Descriptor for the cluster this process runs inside, read from its service account."""

from __future__ import annotations

import os
from collections.abc import Mapping

import structlog
from kubernetes import client as k8s_client
from kubernetes.config import ConfigException
from kubernetes.config.incluster_config import (
    SERVICE_CERT_FILENAME,
    SERVICE_TOKEN_FILENAME,
    InClusterConfigLoader,
)

from kube_cluster_config.clients import from_client_configuration
from kube_cluster_config.models import AccessDescriptor

log = structlog.get_logger()


def load_in_cluster_descriptor(
    token_filename: str = SERVICE_TOKEN_FILENAME,
    cert_filename: str = SERVICE_CERT_FILENAME,
    environ: Mapping[str, str] | None = None,
) -> AccessDescriptor | None:
    """Build the local descriptor from the pod's service account, or None outside a cluster.

    Running outside a cluster is expected for developer machines and is only logged.
    """
    configuration = k8s_client.Configuration()
    loader = InClusterConfigLoader(
        token_filename=token_filename,
        cert_filename=cert_filename,
        try_refresh_token=False,
        environ=os.environ if environ is None else environ,
    )
    try:
        loader.load_and_set(configuration)
    except ConfigException as exc:
        log.warning("in_cluster_config_unavailable", reason=str(exc))
        return None
    return from_client_configuration(configuration)
