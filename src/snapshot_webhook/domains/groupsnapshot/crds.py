"""CRD definitions for the group snapshot domain."""

from snapshot_webhook.clients.base import CRDDefinition

GROUP_NAME = "groupsnapshot.storage.k8s.io"

# Annotation marking a class as the default for its driver
IS_DEFAULT_GROUP_SNAPSHOT_CLASS_ANNOTATION = "groupsnapshot.storage.kubernetes.io/is-default-class"


class GroupSnapshotCRDs:
    """VolumeGroupSnapshot CRD definitions."""

    VOLUME_GROUP_SNAPSHOT_CLASS = CRDDefinition(
        group=GROUP_NAME,
        version="v1beta1",
        plural="volumegroupsnapshotclasses",
        kind="VolumeGroupSnapshotClass",
    )
