"""Kubeconfig loader: contexts to access descriptors, plus the current-context pointer.

Field resolution (file references, base64 payloads, token files, basic auth) is done by
``kubernetes.config.kube_config.KubeConfigLoader``. This module only validates the
document strictly enough that a malformed file fails instead of degrading quietly.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import yaml
from kubernetes import client as k8s_client
from kubernetes.config import ConfigException
from kubernetes.config.kube_config import KubeConfigLoader

from kube_cluster_config.clients import from_client_configuration
from kube_cluster_config.errors import ParseError
from kube_cluster_config.models import AccessDescriptor, AliasMap

log = structlog.get_logger()

_CLUSTER_MATERIAL = (("certificate-authority-data", "certificate-authority"),)
_USER_MATERIAL = (
    ("client-certificate-data", "client-certificate"),
    ("client-key-data", "client-key"),
)


def _read_document(path: Path) -> dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as handle:
            raw = yaml.safe_load(handle)
    except OSError as exc:
        msg = f"cannot read kubeconfig: {exc.strerror}"
        raise ParseError(path, msg) from exc
    except yaml.YAMLError as exc:
        msg = f"invalid YAML: {exc}"
        raise ParseError(path, msg) from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        msg = f"kubeconfig must be a mapping, got {type(raw).__name__}"
        raise ParseError(path, msg)
    return raw


def _named_entries(path: Path, raw: dict[str, Any], section: str, body_key: str) -> dict[str, dict[str, Any]]:
    """Index one of the ``clusters``/``users``/``contexts`` lists by entry name."""
    entries: Any = raw.get(section) or []
    if not isinstance(entries, list):
        msg = f"'{section}' must be a list, got {type(entries).__name__}"
        raise ParseError(path, msg)

    indexed: dict[str, dict[str, Any]] = {}
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            msg = f"{section}[{position}] must be a mapping"
            raise ParseError(path, msg)
        name = entry.get("name")
        if not isinstance(name, str) or not name:
            msg = f"{section}[{position}] is missing a name"
            raise ParseError(path, msg)
        if name in indexed:
            msg = f"duplicate {body_key} name {name!r} in '{section}'"
            raise ParseError(path, msg)
        body = entry.get(body_key) or {}
        if not isinstance(body, dict):
            msg = f"{body_key} {name!r} must be a mapping"
            raise ParseError(path, msg)
        indexed[name] = body
    return indexed


def _check_material(path: Path, owner: str, body: dict[str, Any], data_key: str, file_key: str) -> None:
    data = body.get(data_key)
    reference = body.get(file_key)
    if data and reference:
        msg = f"{owner} sets both '{data_key}' and '{file_key}'"
        raise ParseError(path, msg)
    if data:
        # Line-wrapped payloads are accepted; any other non-alphabet character is not.
        try:
            base64.b64decode("".join(str(data).split()), validate=True)
        except binascii.Error as exc:
            msg = f"{owner}: '{data_key}' is not valid base64"
            raise ParseError(path, msg) from exc
    elif reference:
        target = Path(str(reference))
        if not target.is_absolute():
            target = path.parent / target
        if not target.is_file():
            msg = f"{owner}: cannot read '{file_key}' {str(target)!r}"
            raise ParseError(path, msg)


def _check_cluster(path: Path, name: str, cluster: dict[str, Any]) -> None:
    owner = f"cluster {name!r}"
    if not cluster.get("server"):
        msg = f"{owner} is missing 'server'"
        raise ParseError(path, msg)
    insecure = cluster.get("insecure-skip-tls-verify", False)
    if not isinstance(insecure, bool):
        msg = f"{owner}: 'insecure-skip-tls-verify' must be a boolean, got {insecure!r}"
        raise ParseError(path, msg)
    for data_key, file_key in _CLUSTER_MATERIAL:
        _check_material(path, owner, cluster, data_key, file_key)


def _check_user(path: Path, name: str, user: dict[str, Any]) -> None:
    for data_key, file_key in _USER_MATERIAL:
        _check_material(path, f"user {name!r}", user, data_key, file_key)


def _load_context(path: Path, raw: dict[str, Any], name: str) -> AccessDescriptor:
    configuration = k8s_client.Configuration()
    try:
        loader = KubeConfigLoader(config_dict=raw, active_context=name, config_base_path=str(path.parent))
        loader.load_and_set(configuration)
        return from_client_configuration(configuration)
    except ConfigException as exc:
        msg = f"context {name!r}: {exc}"
        raise ParseError(path, msg) from exc
    except (OSError, ValueError) as exc:
        msg = f"context {name!r}: cannot load credentials: {exc}"
        raise ParseError(path, msg) from exc


def load_kubeconfig(path: str | Path) -> tuple[AliasMap, str]:
    """Parse a kubeconfig document into per-context descriptors.

    Args:
        path: Location of the kubeconfig file.

    Returns:
        A mapping of context name to AccessDescriptor and the document's
        ``current-context`` value, verbatim (empty when not declared).

    Raises:
        ParseError: If the file cannot be read, is malformed, or a context
            references a cluster or user that is not defined.
    """
    path = Path(path)
    raw = _read_document(path)

    clusters = _named_entries(path, raw, "clusters", "cluster")
    users = _named_entries(path, raw, "users", "user")
    contexts = _named_entries(path, raw, "contexts", "context")

    for name, context in contexts.items():
        cluster_name = context.get("cluster")
        if not isinstance(cluster_name, str) or cluster_name not in clusters:
            msg = f"context {name!r} references unknown cluster {cluster_name!r}"
            raise ParseError(path, msg)
        user_name = context.get("user")
        if not isinstance(user_name, str) or user_name not in users:
            msg = f"context {name!r} references unknown user {user_name!r}"
            raise ParseError(path, msg)
        _check_cluster(path, cluster_name, clusters[cluster_name])
        _check_user(path, user_name, users[user_name])

    descriptors: AliasMap = {name: _load_context(path, raw, name) for name in contexts}

    current = raw.get("current-context") or ""
    log.debug("kubeconfig_loaded", path=str(path), contexts=sorted(descriptors), current_context=current)
    return descriptors, str(current)


def load_kubeconfigs(paths: Iterable[str | Path]) -> tuple[AliasMap, str]:
    """Load several kubeconfig files and merge them.

    The first file to define a context name wins, and so does the first
    non-empty ``current-context``.
    """
    merged: AliasMap = {}
    current = ""
    for path in paths:
        descriptors, file_current = load_kubeconfig(path)
        for name, descriptor in descriptors.items():
            if name in merged:
                log.info("kubeconfig_context_shadowed", context=name, path=str(path))
                continue
            merged[name] = descriptor
        if not current:
            current = file_current
    return merged, current
