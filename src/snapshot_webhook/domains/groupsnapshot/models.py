"""Pydantic models for the group snapshot domain."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from snapshot_webhook.domains.groupsnapshot.crds import (
    IS_DEFAULT_GROUP_SNAPSHOT_CLASS_ANNOTATION,
    GroupSnapshotCRDs,
)


class Operation(str, Enum):
    """Admission request operation."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CONNECT = "CONNECT"


WRITE_OPERATIONS = frozenset({Operation.CREATE, Operation.UPDATE})


class GroupSnapshotClass(BaseModel):
    """A VolumeGroupSnapshotClass as seen by the admission webhook.

    Only the fields that matter for admission are kept. The default
    annotation is exposed as a boolean so callers never compare its
    string value themselves.
    """

    name: str = Field("", description="Class name")
    driver: str = Field("", description="CSI driver the class configures")
    annotations: dict[str, str] = Field(default_factory=dict, description="Object annotations")
    deletion_policy: str | None = Field(None, description="Delete or Retain")
    parameters: dict[str, str] = Field(default_factory=dict, description="Driver parameters")

    @property
    def is_default(self) -> bool:
        """Whether the class claims to be the default for its driver."""
        return self.annotations.get(IS_DEFAULT_GROUP_SNAPSHOT_CLASS_ANNOTATION) == "true"

    @classmethod
    def from_manifest(cls, manifest: dict[str, Any] | None) -> GroupSnapshotClass:
        """Build a class from a decoded manifest.

        An empty or missing manifest (the old object of a create request)
        yields an empty class that is never a default.

        Raises:
            ValueError: If the manifest is not a VolumeGroupSnapshotClass.
        """
        if not manifest:
            return cls()
        if not isinstance(manifest, dict):
            raise ValueError(f"expected an object, got {type(manifest).__name__}")

        kind = manifest.get("kind")
        expected_kind = GroupSnapshotCRDs.VOLUME_GROUP_SNAPSHOT_CLASS.kind
        if kind and kind != expected_kind:
            raise ValueError(f"expected kind {expected_kind}, got {kind}")

        metadata = manifest.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise ValueError("metadata must be an object")

        return cls(
            name=metadata.get("name") or "",
            driver=manifest.get("driver") or "",
            annotations=metadata.get("annotations") or {},
            deletion_policy=manifest.get("deletionPolicy"),
            parameters=manifest.get("parameters") or {},
        )

    @classmethod
    def from_resource(cls, resource: Any) -> GroupSnapshotClass:
        """Build a class from a dynamic client list item."""
        return cls.from_manifest(resource.to_dict())


class Verdict(BaseModel):
    """Outcome of an admission decision."""

    allowed: bool = Field(..., description="Whether the write may be committed")
    message: str = Field("", description="Reason shown to the operator when denied")

    @classmethod
    def allow(cls) -> Verdict:
        return cls(allowed=True)

    @classmethod
    def deny(cls, message: str) -> Verdict:
        return cls(allowed=False, message=message)
