"""Value types for cluster access: descriptors, build-cluster entries, and resolution results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from pydantic import Base64Bytes, BaseModel, ConfigDict, Field

IN_CLUSTER_CONTEXT = "in-cluster"
DEFAULT_CLUSTER_ALIAS = "default"

# Note 1: Where the `default` alias came from. The resolver records this tag so the
# precedence decision can be asserted on and logged without re-deriving it.
DefaultSource = Literal["local", "current-context", "foreign", "override"]


@dataclass(frozen=True)
class AccessDescriptor:
    """Everything needed to reach one Kubernetes API server.

    Secret material is excluded from ``repr`` so descriptors can appear in logs.
    """

    host: str
    ca_data: bytes | None = field(default=None, repr=False)
    insecure: bool = False
    bearer_token: str | None = field(default=None, repr=False)
    client_cert_data: bytes | None = field(default=None, repr=False)
    client_key_data: bytes | None = field(default=None, repr=False)
    username: str | None = None
    password: str | None = field(default=None, repr=False)

    @property
    def auth_kind(self) -> str:
        """Short label for the authentication material carried, safe to log."""
        if self.bearer_token:
            return "token"
        if self.client_cert_data and self.client_key_data:
            return "client-certificate"
        if self.username:
            return "basic"
        return "anonymous"


# AliasMap: alias -> descriptor. Reserved keys are IN_CLUSTER_CONTEXT and DEFAULT_CLUSTER_ALIAS.
AliasMap = dict[str, AccessDescriptor]


class BuildCluster(BaseModel):
    """One entry of a build-cluster file.

    Byte fields are base64 encoded in the document and decoded on validation.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    endpoint: str = Field(min_length=1)
    client_certificate: Base64Bytes | None = Field(default=None, alias="clientCertificate")
    client_key: Base64Bytes | None = Field(default=None, alias="clientKey")
    cluster_ca_certificate: Base64Bytes | None = Field(default=None, alias="clusterCaCertificate")

    def to_descriptor(self) -> AccessDescriptor:
        return AccessDescriptor(
            host=self.endpoint,
            ca_data=self.cluster_ca_certificate or None,
            client_cert_data=self.client_certificate or None,
            client_key_data=self.client_key or None,
        )


@dataclass(frozen=True)
class ResolvedClusters:
    """Output of a resolution together with the provenance of the ``default`` alias."""

    clusters: AliasMap
    default_source: DefaultSource
