"""Shared fixtures for snapshot webhook tests."""

from collections.abc import Callable
from typing import Any

import pytest

from snapshot_webhook.domains.groupsnapshot.crds import (
    IS_DEFAULT_GROUP_SNAPSHOT_CLASS_ANNOTATION,
)
from snapshot_webhook.domains.groupsnapshot.models import GroupSnapshotClass


@pytest.fixture
def make_class() -> Callable[..., GroupSnapshotClass]:
    """Factory for GroupSnapshotClass instances."""

    def _make(name: str, driver: str, default: bool = False) -> GroupSnapshotClass:
        annotations = {IS_DEFAULT_GROUP_SNAPSHOT_CLASS_ANNOTATION: "true"} if default else {}
        return GroupSnapshotClass(name=name, driver=driver, annotations=annotations)

    return _make


@pytest.fixture
def make_manifest() -> Callable[..., dict[str, Any]]:
    """Factory for VolumeGroupSnapshotClass manifests."""

    def _make(name: str, driver: str, default: bool = False) -> dict[str, Any]:
        metadata: dict[str, Any] = {"name": name}
        if default:
            metadata["annotations"] = {IS_DEFAULT_GROUP_SNAPSHOT_CLASS_ANNOTATION: "true"}
        return {
            "apiVersion": "groupsnapshot.storage.k8s.io/v1beta1",
            "kind": "VolumeGroupSnapshotClass",
            "metadata": metadata,
            "driver": driver,
            "deletionPolicy": "Delete",
        }

    return _make


@pytest.fixture
def make_review() -> Callable[..., dict[str, Any]]:
    """Factory for AdmissionReview requests."""

    def _make(
        operation: str = "CREATE",
        obj: dict[str, Any] | None = None,
        old_obj: dict[str, Any] | None = None,
        resource: dict[str, str] | None = None,
        uid: str = "req-1",
    ) -> dict[str, Any]:
        return {
            "apiVersion": "admission.k8s.io/v1",
            "kind": "AdmissionReview",
            "request": {
                "uid": uid,
                "operation": operation,
                "resource": resource
                or {
                    "group": "groupsnapshot.storage.k8s.io",
                    "version": "v1beta1",
                    "resource": "volumegroupsnapshotclasses",
                },
                "object": obj,
                "oldObject": old_obj,
            },
        }

    return _make
