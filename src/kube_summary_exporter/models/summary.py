# src/kube_summary_exporter/models/summary.py
"""
Pydantic models for the kubelet /stats/summary payload.

Only the parts of the summary that are exported as metrics are modeled;
every other key of the kubelet response is ignored. Wire names are the
kubelet's camelCase keys, exposed as snake_case attributes.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator


class _SummaryModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


def _null_as_empty(value):
    # The kubelet serializes empty slices as null.
    return [] if value is None else value


class FsStats(_SummaryModel):
    """
    Filesystem usage as reported by the kubelet.

    Every field is independently optional: None means the container runtime
    did not report the value on this node, which is different from zero.

    Attributes:
        available_bytes: Bytes not consumed, available to the workload
        capacity_bytes: Total bytes of the underlying filesystem
        used_bytes: Bytes consumed by the workload
        inodes_free: Free inodes on the filesystem
        inodes: Total inodes on the filesystem
        inodes_used: Inodes consumed by the workload
    """

    available_bytes: Optional[NonNegativeInt] = Field(None, alias="availableBytes")
    capacity_bytes: Optional[NonNegativeInt] = Field(None, alias="capacityBytes")
    used_bytes: Optional[NonNegativeInt] = Field(None, alias="usedBytes")
    inodes_free: Optional[NonNegativeInt] = Field(None, alias="inodesFree")
    inodes: Optional[NonNegativeInt] = Field(None, alias="inodes")
    inodes_used: Optional[NonNegativeInt] = Field(None, alias="inodesUsed")


class ContainerStats(_SummaryModel):
    name: str
    logs: Optional[FsStats] = None
    rootfs: Optional[FsStats] = None


class PodReference(_SummaryModel):
    name: str
    namespace: str
    uid: Optional[str] = None


class PodStats(_SummaryModel):
    pod_ref: PodReference = Field(..., alias="podRef")
    containers: List[ContainerStats] = Field(default_factory=list)
    ephemeral_storage: Optional[FsStats] = Field(None, alias="ephemeral-storage")

    @field_validator("containers", mode="before")
    @classmethod
    def containers_not_null(cls, value):
        return _null_as_empty(value)


class RuntimeStats(_SummaryModel):
    image_fs: Optional[FsStats] = Field(None, alias="imageFs")


class NodeStats(_SummaryModel):
    node_name: Optional[str] = Field(None, alias="nodeName")
    runtime: Optional[RuntimeStats] = None


class Summary(_SummaryModel):
    """Root of one node's /stats/summary response."""

    node: NodeStats = Field(default_factory=NodeStats)
    pods: List[PodStats] = Field(default_factory=list)

    @field_validator("pods", mode="before")
    @classmethod
    def pods_not_null(cls, value):
        return _null_as_empty(value)


class PerNodeResult(BaseModel):
    """A node name paired with the summary fetched from its kubelet."""

    model_config = ConfigDict(frozen=True)

    node_name: str = Field(..., description="Node name, used as the 'node' label value")
    summary: Summary
