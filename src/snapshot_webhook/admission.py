"""AdmissionReview envelope models for admission.k8s.io/v1."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from snapshot_webhook.domains.groupsnapshot.models import Verdict
from snapshot_webhook.utils.errors import error_message

ADMISSION_API_VERSION = "admission.k8s.io/v1"
ADMISSION_REVIEW_KIND = "AdmissionReview"


class GroupVersionResource(BaseModel):
    """Fully qualified resource type of an admission request."""

    model_config = ConfigDict(frozen=True)

    group: str = ""
    version: str = ""
    resource: str = ""

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Resource={self.resource}"


class AdmissionRequest(BaseModel):
    """The request half of an AdmissionReview.

    Only the fields the webhook reads are modelled; everything else the API
    server sends is ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    uid: str = Field(..., description="Request UID, echoed in the response")
    operation: str = Field(..., description="CREATE, UPDATE, DELETE or CONNECT")
    resource: GroupVersionResource = Field(default_factory=GroupVersionResource)
    name: str | None = Field(None, description="Name of the object, if known")
    object: dict[str, Any] | None = Field(None, description="The submitted object")
    old_object: dict[str, Any] | None = Field(
        None, alias="oldObject", description="The previously committed object"
    )


def parse_request(review: dict[str, Any]) -> AdmissionRequest:
    """Extract the request from a decoded AdmissionReview.

    Raises:
        ValueError: If the review carries no valid request.
    """
    request = review.get("request")
    if not isinstance(request, dict):
        raise ValueError("AdmissionReview has no request")
    return AdmissionRequest.model_validate(request)


def review_response(uid: str, verdict: Verdict) -> dict[str, Any]:
    """Wrap a verdict in an AdmissionReview response envelope."""
    response: dict[str, Any] = {"uid": uid, "allowed": verdict.allowed}
    if verdict.message:
        response["status"] = {"message": verdict.message}
    return {
        "apiVersion": ADMISSION_API_VERSION,
        "kind": ADMISSION_REVIEW_KIND,
        "response": response,
    }


def error_response(uid: str, err: Exception) -> dict[str, Any]:
    """Deny a request that could not be processed."""
    return review_response(uid, Verdict.deny(error_message(err)))
