"""Conversions between access descriptors and kubernetes client configuration, plus API clients."""

from __future__ import annotations

import atexit
import base64
import binascii
import contextlib
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path

from kubernetes import client as k8s_client

from kube_cluster_config.models import AccessDescriptor

# (payload, suffix) -> temp file path. One file per distinct payload for the life of the process.
_materialised: dict[tuple[bytes, str], str] = {}


def _cleanup_temp_files() -> None:
    while _materialised:
        _, name = _materialised.popitem()
        with contextlib.suppress(FileNotFoundError):
            os.remove(name)


atexit.register(_cleanup_temp_files)


# Note 1: The Python client only accepts certificate material as file paths, so inline
# bytes are written to private temp files that live until interpreter exit.
def _materialise(data: bytes, suffix: str) -> str:
    key = (data, suffix)
    name = _materialised.get(key)
    if name is not None and os.path.exists(name):
        return name
    handle = tempfile.NamedTemporaryFile(prefix="kube-cluster-config-", suffix=suffix, delete=False)
    with handle:
        handle.write(data)
    _materialised[key] = handle.name
    return handle.name


def _read_optional(path: str | None) -> bytes | None:
    if not path:
        return None
    return Path(path).read_bytes()


def _authorization_header(configuration: k8s_client.Configuration) -> str:
    # Recent client releases store the header under "BearerToken", older ones under "authorization".
    api_key = configuration.api_key or {}
    return api_key.get("BearerToken") or api_key.get("authorization") or ""


def from_client_configuration(configuration: k8s_client.Configuration) -> AccessDescriptor:
    """Capture a loaded ``kubernetes.client.Configuration`` as an AccessDescriptor.

    Certificate files referenced by the configuration are read into memory.

    Raises:
        OSError: If a referenced certificate file cannot be read.
        ValueError: If a basic auth header is not valid base64.
    """
    scheme, _, credentials = _authorization_header(configuration).partition(" ")
    bearer_token = username = password = None
    if scheme.lower() == "bearer":
        bearer_token = credentials.strip() or None
    elif scheme.lower() == "basic":
        try:
            decoded = base64.b64decode(credentials, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            msg = "basic auth header is not valid base64"
            raise ValueError(msg) from exc
        username, _, password = decoded.partition(":")

    return AccessDescriptor(
        host=configuration.host,
        ca_data=_read_optional(configuration.ssl_ca_cert),
        insecure=not configuration.verify_ssl,
        bearer_token=bearer_token,
        client_cert_data=_read_optional(configuration.cert_file),
        client_key_data=_read_optional(configuration.key_file),
        username=username or None,
        password=password or None,
    )


def to_client_configuration(descriptor: AccessDescriptor) -> k8s_client.Configuration:
    """Translate a descriptor into a standalone ``kubernetes.client.Configuration``."""
    configuration = k8s_client.Configuration()
    configuration.host = descriptor.host
    configuration.verify_ssl = not descriptor.insecure

    if descriptor.ca_data and not descriptor.insecure:
        configuration.ssl_ca_cert = _materialise(descriptor.ca_data, ".crt")
    if descriptor.client_cert_data and descriptor.client_key_data:
        configuration.cert_file = _materialise(descriptor.client_cert_data, ".crt")
        configuration.key_file = _materialise(descriptor.client_key_data, ".key")

    if descriptor.bearer_token:
        configuration.api_key = {"authorization": f"Bearer {descriptor.bearer_token}"}
    elif descriptor.username:
        configuration.username = descriptor.username
        configuration.password = descriptor.password or ""
    return configuration


# Note 2: Each caller receives its own ApiClient. Nothing here calls
# `Configuration.set_default`, so clients for different clusters never share auth state.
def load_k8s_api_client(descriptor: AccessDescriptor) -> k8s_client.ApiClient:
    """Create an isolated Kubernetes API client for the given descriptor."""
    return k8s_client.ApiClient(configuration=to_client_configuration(descriptor))


def build_clients(clusters: Mapping[str, AccessDescriptor]) -> dict[str, k8s_client.ApiClient]:
    """Create one API client per alias of a resolved alias map."""
    return {alias: load_k8s_api_client(descriptor) for alias, descriptor in clusters.items()}
