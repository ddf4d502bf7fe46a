"""Environment settings and the top-level loader that turns every source into an alias map."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from kube_cluster_config.build_clusters import load_build_clusters
from kube_cluster_config.in_cluster import load_in_cluster_descriptor
from kube_cluster_config.kubeconfig import load_kubeconfigs
from kube_cluster_config.logs import configure_logging
from kube_cluster_config.models import IN_CLUSTER_CONTEXT, AccessDescriptor, AliasMap
from kube_cluster_config.resolver import resolve_clusters

log = structlog.get_logger()


def _split_paths(value: str) -> tuple[str, ...]:
    return tuple(p for p in value.split(os.pathsep) if p)


@dataclass(frozen=True)
class Settings:
    """Credential file locations with environment variable overrides."""

    kubeconfig: tuple[str, ...] = field(default_factory=lambda: _split_paths(os.environ.get("KUBECONFIG", "")))
    build_cluster_file: str = field(default_factory=lambda: os.environ.get("BUILD_CLUSTER_FILE", ""))


def get_settings() -> Settings:
    """Return settings with environment variable overrides applied."""
    return Settings()


def load_cluster_configs(
    kubeconfig: str | tuple[str, ...] = "",
    build_cluster: str = "",
    local_loader: Callable[[], AccessDescriptor | None] | None = None,
) -> AliasMap:
    """Load every configured source and resolve the alias map.

    Args:
        kubeconfig: One kubeconfig path, an ``os.pathsep``-separated list, or a tuple of paths.
            Empty means no kubeconfig.
        build_cluster: Path to a build-cluster file, or empty for none.
        local_loader: Produces the in-cluster descriptor, or None outside a cluster.
            Defaults to reading the pod service account.

    Returns:
        The alias map, always holding ``in-cluster`` and ``default``.

    Raises:
        ParseError: If a kubeconfig or build-cluster file is unusable.
        ConfigError: If the sources cannot be combined.
    """
    paths = _split_paths(kubeconfig) if isinstance(kubeconfig, str) else kubeconfig
    log.info("loading_cluster_contexts", kubeconfig=list(paths), build_cluster=build_cluster or None)

    local = (local_loader or load_in_cluster_descriptor)()
    foreign, current_context = load_kubeconfigs(paths)
    overrides = load_build_clusters(build_cluster)

    resolved = resolve_clusters(local, foreign, current_context, overrides)
    log.info(
        "cluster_contexts_resolved",
        aliases=sorted(resolved.clusters),
        default_source=resolved.default_source,
        in_cluster_host=resolved.clusters[IN_CLUSTER_CONTEXT].host,
    )
    return resolved.clusters


def load_cluster_configs_from_env() -> AliasMap:
    """Resolve the alias map using ``KUBECONFIG`` and ``BUILD_CLUSTER_FILE``.

    This is the process-level entry point, so it also installs the structlog configuration.
    """
    configure_logging()
    settings = get_settings()
    return load_cluster_configs(settings.kubeconfig, settings.build_cluster_file)
