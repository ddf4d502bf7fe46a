"""Merge local, kubeconfig, and build-cluster sources into a single alias map."""

from __future__ import annotations

from collections.abc import Mapping

from kube_cluster_config.errors import (
    CurrentContextRequiredError,
    NoClusterConfiguredError,
    OverridesMissingDefaultError,
    OverridesRequireLocalError,
)
from kube_cluster_config.models import (
    DEFAULT_CLUSTER_ALIAS,
    IN_CLUSTER_CONTEXT,
    AccessDescriptor,
    AliasMap,
    DefaultSource,
    ResolvedClusters,
)


def _validate(
    local: AccessDescriptor | None,
    foreign: Mapping[str, AccessDescriptor],
    overrides: Mapping[str, AccessDescriptor],
) -> None:
    if local is None and not foreign and not overrides:
        raise NoClusterConfiguredError()
    if overrides and local is None:
        raise OverridesRequireLocalError()
    if overrides and DEFAULT_CLUSTER_ALIAS not in overrides:
        valid = ", ".join(sorted(overrides))
        msg = f"got {valid}"
        raise OverridesMissingDefaultError(msg)


def default_source(
    local: AccessDescriptor | None,
    foreign: Mapping[str, AccessDescriptor],
    overrides: Mapping[str, AccessDescriptor],
) -> DefaultSource:
    """Decide which source owns the ``default`` alias.

    Order of authority: build-cluster overrides, then a local descriptor, then an
    explicit ``default`` entry in the kubeconfig, then the kubeconfig's current context.
    """
    if overrides:
        return "override"
    if local is not None:
        return "local"
    if DEFAULT_CLUSTER_ALIAS in foreign:
        return "foreign"
    return "current-context"


def resolve_clusters(
    local: AccessDescriptor | None = None,
    foreign: Mapping[str, AccessDescriptor] | None = None,
    current_context: str = "",
    overrides: Mapping[str, AccessDescriptor] | None = None,
) -> ResolvedClusters:
    """Resolve every source into an alias map and record where ``default`` came from.

    Raises:
        ConfigError: One subclass per violated rule; no partial map is returned.
    """
    foreign = foreign or {}
    overrides = overrides or {}
    _validate(local, foreign, overrides)

    clusters: AliasMap = dict(foreign)
    source = default_source(local, foreign, overrides)

    if local is not None:
        clusters[IN_CLUSTER_CONTEXT] = local
    else:
        if not current_context or current_context not in foreign:
            msg = f"{current_context!r} is not a known context"
            raise CurrentContextRequiredError(msg)
        clusters[IN_CLUSTER_CONTEXT] = foreign[current_context]

    if source == "local":
        clusters[DEFAULT_CLUSTER_ALIAS] = local  # type: ignore[assignment]
    elif source == "current-context":
        clusters[DEFAULT_CLUSTER_ALIAS] = foreign[current_context]
    elif source == "override":
        # Overrides replace every colliding key, `in-cluster` included. Letting a
        # build-cluster entry redefine `in-cluster` next to a local descriptor is
        # inferred precedence; no known deployment supplies it.
        clusters.update(overrides)
    # "foreign": the kubeconfig's own `default` entry is already in place.

    return ResolvedClusters(clusters=clusters, default_source=source)


def resolve(
    local: AccessDescriptor | None = None,
    foreign: Mapping[str, AccessDescriptor] | None = None,
    current_context: str = "",
    overrides: Mapping[str, AccessDescriptor] | None = None,
) -> AliasMap:
    """Return the alias map for the given sources.

    The result always holds ``in-cluster`` and ``default``.
    """
    return resolve_clusters(local, foreign, current_context, overrides).clusters
