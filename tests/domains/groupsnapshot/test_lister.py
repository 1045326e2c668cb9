"""Tests for group snapshot class listers."""

from unittest.mock import MagicMock

import pytest
from kubernetes.dynamic.resource import ResourceInstance

from snapshot_webhook.domains.groupsnapshot.crds import GroupSnapshotCRDs
from snapshot_webhook.domains.groupsnapshot.lister import K8sClassLister, StaticClassLister
from snapshot_webhook.utils.errors import ListerError, WebhookError


class TestStaticClassLister:
    """Test the in-memory lister."""

    def test_returns_copy(self, make_class) -> None:
        classes = [make_class("a", "d1")]
        lister = StaticClassLister(classes)

        listed = lister.list_all()
        listed.append(make_class("b", "d1"))

        assert [c.name for c in lister.list_all()] == ["a"]

    def test_empty(self) -> None:
        assert StaticClassLister().list_all() == []


class TestK8sClassLister:
    """Test the Kubernetes-backed lister."""

    @pytest.fixture
    def mock_k8s(self) -> MagicMock:
        """Create a mock K8sClient."""
        return MagicMock()

    def _resource(self, manifest) -> MagicMock:
        resource = MagicMock()
        resource.to_dict.return_value = manifest
        return resource

    def test_list_all(self, mock_k8s: MagicMock, make_manifest) -> None:
        mock_k8s.list_cluster.return_value = [
            self._resource(make_manifest("a", "d1", True)),
            self._resource(make_manifest("b", "d2")),
        ]

        classes = K8sClassLister(mock_k8s).list_all()

        mock_k8s.list_cluster.assert_called_once_with(
            GroupSnapshotCRDs.VOLUME_GROUP_SNAPSHOT_CLASS
        )
        assert [(c.name, c.driver, c.is_default) for c in classes] == [
            ("a", "d1", True),
            ("b", "d2", False),
        ]

    def test_client_error_raised_as_lister_error(self, mock_k8s: MagicMock) -> None:
        mock_k8s.list_cluster.side_effect = WebhookError(
            "Failed to list VolumeGroupSnapshotClass: Forbidden"
        )

        with pytest.raises(ListerError, match="Forbidden"):
            K8sClassLister(mock_k8s).list_all()

    def test_undecodable_item_raised_as_lister_error(self, mock_k8s: MagicMock) -> None:
        mock_k8s.list_cluster.return_value = [self._resource({"kind": "Pod", "metadata": {}})]

        with pytest.raises(ListerError, match="Failed to decode"):
            K8sClassLister(mock_k8s).list_all()

    def test_list_all_from_dynamic_client_items(self, mock_k8s: MagicMock, make_manifest) -> None:
        """Items of a real dynamic client list response decode to classes."""
        manifests = [make_manifest("b", "d2"), make_manifest("a", "d1", True)]
        for manifest in manifests:
            del manifest["apiVersion"], manifest["kind"]
        response = ResourceInstance(
            None,
            {
                "apiVersion": "groupsnapshot.storage.k8s.io/v1beta1",
                "kind": "VolumeGroupSnapshotClassList",
                "metadata": {"resourceVersion": "42"},
                "items": manifests,
            },
        )
        mock_k8s.list_cluster.return_value = list(response.items)

        classes = K8sClassLister(mock_k8s).list_all()

        assert [(c.name, c.driver, c.is_default, c.deletion_policy) for c in classes] == [
            ("b", "d2", False, "Delete"),
            ("a", "d1", True, "Delete"),
        ]
