"""Tests for group snapshot models."""

from unittest.mock import MagicMock

import pytest

from snapshot_webhook.domains.groupsnapshot.models import GroupSnapshotClass, Verdict


class TestGroupSnapshotClass:
    """Test GroupSnapshotClass model."""

    def test_from_manifest(self, make_manifest) -> None:
        manifest = make_manifest("csi-hostpath-groupsnapclass", "hostpath.csi.k8s.io", True)
        manifest["parameters"] = {"type": "fast"}

        cls = GroupSnapshotClass.from_manifest(manifest)

        assert cls.name == "csi-hostpath-groupsnapclass"
        assert cls.driver == "hostpath.csi.k8s.io"
        assert cls.deletion_policy == "Delete"
        assert cls.parameters == {"type": "fast"}
        assert cls.is_default is True

    def test_from_manifest_without_annotations(self, make_manifest) -> None:
        cls = GroupSnapshotClass.from_manifest(make_manifest("plain", "d1"))

        assert cls.annotations == {}
        assert cls.is_default is False

    @pytest.mark.parametrize("manifest", [None, {}])
    def test_empty_manifest_is_empty_class(self, manifest) -> None:
        """The old object of a create request decodes to an empty class."""
        cls = GroupSnapshotClass.from_manifest(manifest)

        assert cls.name == ""
        assert cls.driver == ""
        assert cls.is_default is False

    def test_wrong_kind_rejected(self, make_manifest) -> None:
        manifest = make_manifest("a", "d1")
        manifest["kind"] = "VolumeSnapshotClass"

        with pytest.raises(ValueError, match="expected kind VolumeGroupSnapshotClass"):
            GroupSnapshotClass.from_manifest(manifest)

    def test_non_object_metadata_rejected(self) -> None:
        with pytest.raises(ValueError, match="metadata must be an object"):
            GroupSnapshotClass.from_manifest({"metadata": "oops", "driver": "d1"})

    def test_invalid_field_type_rejected(self) -> None:
        with pytest.raises(ValueError):
            GroupSnapshotClass.from_manifest({"metadata": {"name": "a"}, "driver": ["d1"]})

    def test_from_resource(self, make_manifest) -> None:
        resource = MagicMock()
        resource.to_dict.return_value = make_manifest("a", "d1", True)

        cls = GroupSnapshotClass.from_resource(resource)

        assert cls.name == "a"
        assert cls.is_default is True


class TestVerdict:
    """Test Verdict model."""

    def test_allow(self) -> None:
        verdict = Verdict.allow()
        assert verdict.allowed is True
        assert verdict.message == ""

    def test_deny(self) -> None:
        verdict = Verdict.deny("nope")
        assert verdict.allowed is False
        assert verdict.message == "nope"
