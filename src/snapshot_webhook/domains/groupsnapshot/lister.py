"""Read-only views over committed VolumeGroupSnapshotClasses."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

from snapshot_webhook.domains.groupsnapshot.crds import GroupSnapshotCRDs
from snapshot_webhook.domains.groupsnapshot.models import GroupSnapshotClass
from snapshot_webhook.utils.errors import ListerError, error_message

if TYPE_CHECKING:
    from snapshot_webhook.clients.base import K8sClient

logger = logging.getLogger(__name__)


class ClassLister(Protocol):
    """Enumerates every committed group snapshot class, across all drivers."""

    def list_all(self) -> list[GroupSnapshotClass]:
        """Return all classes.

        Raises:
            ListerError: If the classes cannot be read.
        """
        ...


class StaticClassLister:
    """In-memory lister over a fixed set of classes."""

    def __init__(self, classes: Iterable[GroupSnapshotClass] = ()) -> None:
        self._classes = list(classes)

    def list_all(self) -> list[GroupSnapshotClass]:
        return list(self._classes)


class K8sClassLister:
    """Lister backed by the Kubernetes API.

    Each call performs one cluster-wide list; there is no local cache, so
    the view is as fresh as the API server's.
    """

    def __init__(self, k8s: K8sClient) -> None:
        self._k8s = k8s

    def list_all(self) -> list[GroupSnapshotClass]:
        try:
            items = self._k8s.list_cluster(GroupSnapshotCRDs.VOLUME_GROUP_SNAPSHOT_CLASS)
        except Exception as e:
            raise ListerError(str(e)) from e

        classes = []
        for item in items:
            try:
                classes.append(GroupSnapshotClass.from_resource(item))
            except ValueError as e:
                raise ListerError(
                    f"Failed to decode VolumeGroupSnapshotClass: {error_message(e)}"
                ) from e

        logger.debug(f"Listed {len(classes)} VolumeGroupSnapshotClasses")
        return classes
