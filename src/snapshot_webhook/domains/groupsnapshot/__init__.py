"""Group snapshot class admission: models, listers and the default-uniqueness rule."""

from snapshot_webhook.domains.groupsnapshot.lister import (
    ClassLister,
    K8sClassLister,
    StaticClassLister,
)
from snapshot_webhook.domains.groupsnapshot.models import (
    GroupSnapshotClass,
    Operation,
    Verdict,
)
from snapshot_webhook.domains.groupsnapshot.validator import decide

__all__ = [
    "ClassLister",
    "GroupSnapshotClass",
    "K8sClassLister",
    "Operation",
    "StaticClassLister",
    "Verdict",
    "decide",
]
