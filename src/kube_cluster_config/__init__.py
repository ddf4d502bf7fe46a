"""Resolve Kubernetes cluster aliases from in-cluster, kubeconfig, and build-cluster sources."""

from kube_cluster_config.build_clusters import load_build_clusters
from kube_cluster_config.config import Settings, load_cluster_configs, load_cluster_configs_from_env
from kube_cluster_config.errors import (
    ConfigError,
    CurrentContextRequiredError,
    NoClusterConfiguredError,
    OverridesMissingDefaultError,
    OverridesRequireLocalError,
    ParseError,
)
from kube_cluster_config.in_cluster import load_in_cluster_descriptor
from kube_cluster_config.kubeconfig import load_kubeconfig, load_kubeconfigs
from kube_cluster_config.models import (
    DEFAULT_CLUSTER_ALIAS,
    IN_CLUSTER_CONTEXT,
    AccessDescriptor,
    AliasMap,
    BuildCluster,
    ResolvedClusters,
)
from kube_cluster_config.resolver import resolve, resolve_clusters

__all__ = [
    "DEFAULT_CLUSTER_ALIAS",
    "IN_CLUSTER_CONTEXT",
    "AccessDescriptor",
    "AliasMap",
    "BuildCluster",
    "ConfigError",
    "CurrentContextRequiredError",
    "NoClusterConfiguredError",
    "OverridesMissingDefaultError",
    "OverridesRequireLocalError",
    "ParseError",
    "ResolvedClusters",
    "Settings",
    "load_build_clusters",
    "load_cluster_configs",
    "load_cluster_configs_from_env",
    "load_in_cluster_descriptor",
    "load_kubeconfig",
    "load_kubeconfigs",
    "resolve",
    "resolve_clusters",
]
