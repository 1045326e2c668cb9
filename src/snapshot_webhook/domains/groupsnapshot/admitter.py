"""Admission handling for VolumeGroupSnapshotClass requests."""

import logging
from typing import Any

from snapshot_webhook.admission import (
    GroupVersionResource,
    error_response,
    parse_request,
    review_response,
)
from snapshot_webhook.domains.groupsnapshot.crds import GroupSnapshotCRDs
from snapshot_webhook.domains.groupsnapshot.lister import ClassLister
from snapshot_webhook.domains.groupsnapshot.models import (
    WRITE_OPERATIONS,
    GroupSnapshotClass,
    Operation,
    Verdict,
)
from snapshot_webhook.domains.groupsnapshot.validator import decide
from snapshot_webhook.utils.errors import error_message

logger = logging.getLogger(__name__)

_CRD = GroupSnapshotCRDs.VOLUME_GROUP_SNAPSHOT_CLASS

GROUP_SNAPSHOT_CLASS_V1BETA1_GVR = GroupVersionResource(
    group=_CRD.group,
    version=_CRD.version,
    resource=_CRD.plural,
)


class GroupSnapshotAdmitter:
    """Admits or rejects writes of VolumeGroupSnapshotClasses."""

    def __init__(self, lister: ClassLister) -> None:
        self._lister = lister

    def admit(self, review: dict[str, Any]) -> dict[str, Any]:
        """Answer an AdmissionReview with an AdmissionReview response."""
        logger.debug("Admitting volumegroupsnapshotclasses")

        try:
            request = parse_request(review)
        except ValueError as e:
            logger.error(f"Failed to decode admission request: {error_message(e)}")
            return error_response(_request_uid(review), e)

        try:
            operation = Operation(request.operation)
        except ValueError:
            operation = None

        # Admit requests other than Update and Create
        if operation not in WRITE_OPERATIONS:
            return review_response(request.uid, Verdict.allow())

        if request.resource != GROUP_SNAPSHOT_CLASS_V1BETA1_GVR:
            err = ValueError(
                f"expect resource to be {GROUP_SNAPSHOT_CLASS_V1BETA1_GVR}, "
                f"but found {request.resource}"
            )
            logger.error(str(err))
            return error_response(request.uid, err)

        try:
            new_class = GroupSnapshotClass.from_manifest(request.object)
            old_class = GroupSnapshotClass.from_manifest(request.old_object)
        except ValueError as e:
            logger.error(f"Failed to decode VolumeGroupSnapshotClass: {error_message(e)}")
            return error_response(request.uid, e)

        verdict = decide(new_class, old_class, self._lister, operation=operation)
        if not verdict.allowed:
            logger.info(f"Denied {operation.value} of {new_class.name!r}: {verdict.message}")
        return review_response(request.uid, verdict)


def _request_uid(review: Any) -> str:
    """Best-effort UID of a request that failed to decode."""
    request = review.get("request") if isinstance(review, dict) else None
    uid = request.get("uid") if isinstance(request, dict) else None
    return uid if isinstance(uid, str) else ""
