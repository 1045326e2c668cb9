"""Validating admission webhook for VolumeGroupSnapshotClass resources."""

__version__ = "0.1.0"
