"""Default-uniqueness rule for VolumeGroupSnapshotClasses.

At most one class per driver may carry the default annotation. The rule is
checked when a write claims default status; classes that already violate it
are not audited.
"""

import logging

from snapshot_webhook.domains.groupsnapshot.lister import ClassLister
from snapshot_webhook.domains.groupsnapshot.models import (
    WRITE_OPERATIONS,
    GroupSnapshotClass,
    Operation,
    Verdict,
)

logger = logging.getLogger(__name__)


def decide(
    new_class: GroupSnapshotClass,
    old_class: GroupSnapshotClass | None,
    lister: ClassLister,
    operation: Operation = Operation.CREATE,
) -> Verdict:
    """Decide whether a write of ``new_class`` may be admitted.

    Args:
        new_class: The class as submitted.
        old_class: The previously committed class, or None on create.
        lister: Read-only view of all committed classes.
        operation: The admission operation being performed.

    Returns:
        An allowing verdict, or a denial naming the conflicting class. A
        failed read is a denial carrying the failure text.
    """
    if operation not in WRITE_OPERATIONS:
        return Verdict.allow()

    # Only validate when the class is being set as a default.
    if not new_class.is_default:
        return Verdict.allow()

    # An old default for the same driver was validated when it was set.
    if old_class is not None and old_class.is_default and old_class.driver == new_class.driver:
        return Verdict.allow()

    try:
        existing = lister.list_all()
    except Exception as e:
        logger.warning(f"Failed to list VolumeGroupSnapshotClasses: {e}")
        return Verdict.deny(str(e))

    for candidate in sorted(existing, key=lambda c: c.name):
        if not candidate.is_default:
            continue
        if candidate.driver == new_class.driver:
            logger.debug(
                f"Rejecting default class {new_class.name!r}: "
                f"{candidate.name!r} is already default for {new_class.driver!r}"
            )
            return Verdict.deny(
                f"default group snapshot class: {candidate.name} already exists "
                f"for driver: {new_class.driver}"
            )

    return Verdict.allow()
