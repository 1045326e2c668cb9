"""FastAPI application serving the validating webhook endpoints."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from starlette.concurrency import run_in_threadpool

from snapshot_webhook import __version__
from snapshot_webhook.clients.base import get_k8s_client
from snapshot_webhook.config import WebhookConfig
from snapshot_webhook.domains.groupsnapshot.admitter import GroupSnapshotAdmitter
from snapshot_webhook.domains.groupsnapshot.crds import GroupSnapshotCRDs
from snapshot_webhook.domains.groupsnapshot.lister import ClassLister, K8sClassLister

logger = logging.getLogger(__name__)

GROUP_SNAPSHOT_PATH = "/volumegroupsnapshot"


class WebhookServer:
    """Validating webhook server.

    When no lister is injected, a Kubernetes client is connected for the
    lifetime of the application and used to list existing classes.
    """

    def __init__(
        self,
        config: WebhookConfig | None = None,
        lister: ClassLister | None = None,
    ) -> None:
        self._config = config or WebhookConfig()
        self._lister = lister
        self._admitter: GroupSnapshotAdmitter | None = (
            GroupSnapshotAdmitter(lister) if lister is not None else None
        )

    @property
    def config(self) -> WebhookConfig:
        """Get server configuration."""
        return self._config

    @property
    def admitter(self) -> GroupSnapshotAdmitter:
        """Get the group snapshot admitter.

        Raises:
            RuntimeError: If the server has not started.
        """
        if self._admitter is None:
            raise RuntimeError("Server not running. Admitter not available.")
        return self._admitter

    @property
    def ready(self) -> bool:
        return self._admitter is not None

    @asynccontextmanager
    async def lifespan(self, _app: FastAPI) -> AsyncIterator[None]:
        """Connect to Kubernetes on startup and disconnect on shutdown."""
        logger.info("Starting snapshot validation webhook...")
        if self._lister is not None:
            yield
            logger.info("Snapshot validation webhook shut down")
            return

        crd = GroupSnapshotCRDs.VOLUME_GROUP_SNAPSHOT_CLASS
        with get_k8s_client(self._config, crd) as k8s:
            self._admitter = GroupSnapshotAdmitter(K8sClassLister(k8s))
            logger.info("Snapshot validation webhook started")
            try:
                yield
            finally:
                logger.info("Shutting down snapshot validation webhook...")
                self._admitter = None

    def create_app(self) -> FastAPI:
        """Create the FastAPI application."""
        app = FastAPI(
            title="Snapshot Validation Webhook",
            version=__version__,
            lifespan=self.lifespan,
        )

        @app.post(GROUP_SNAPSHOT_PATH)
        async def serve_group_snapshot(request: Request) -> dict[str, Any]:
            review = await _read_review(request)
            return await run_in_threadpool(self.admitter.admit, review)

        @app.get("/readyz")
        async def readyz() -> dict[str, str]:
            if not self.ready:
                raise HTTPException(status_code=503, detail="not ready")
            return {"status": "ok"}

        return app


async def _read_review(request: Request) -> dict[str, Any]:
    """Decode the AdmissionReview body of a webhook call."""
    body = await request.body()
    try:
        review = json.loads(body)
    except ValueError as e:
        logger.error(f"Failed to decode request body: {e}")
        raise HTTPException(status_code=400, detail=f"invalid JSON body: {e}")
    if not isinstance(review, dict):
        raise HTTPException(status_code=400, detail="AdmissionReview must be a JSON object")
    return review


def create_app(
    config: WebhookConfig | None = None,
    lister: ClassLister | None = None,
) -> FastAPI:
    """Create the webhook application."""
    return WebhookServer(config, lister).create_app()
