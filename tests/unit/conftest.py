# Copyright 2025 The NFS Subdir Provisioner Project
# See LICENSE file for licensing details.

"""Fixtures for unit tests."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from lightkube.models.core_v1 import (
    NFSVolumeSource,
    PersistentVolumeClaimSpec,
    PersistentVolumeSpec,
    VolumeResourceRequirements,
)
from lightkube.models.meta_v1 import LabelSelector, ObjectMeta
from lightkube.resources.core_v1 import PersistentVolume, PersistentVolumeClaim
from lightkube.resources.storage_v1 import StorageClass

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from _nfs_subdir import ProvisionerConfig, ProvisionOptions

EXPORT_PATH = "/exports/k8s"
NFS_SERVER = "nfs.example.com"
PROVISIONER_NAME = "k8s-sigs.io/nfs-subdir-external-provisioner"
STORAGE_CLASS_NAME = "nfs-client"


@pytest.fixture
def mount_root(tmp_path: Path) -> Path:
    """Directory standing in for the mounted export."""
    root = tmp_path / "persistentvolumes"
    root.mkdir()
    return root


@pytest.fixture
def config(mount_root: Path) -> ProvisionerConfig:
    """Provisioner configuration rooted at a temporary mount."""
    return ProvisionerConfig(
        server=NFS_SERVER,
        export_path=EXPORT_PATH,
        provisioner_name=PROVISIONER_NAME,
        mount_root=str(mount_root),
    )


@pytest.fixture
def mock_chown():
    """Patch os.chown so ownership changes work without root."""
    with patch("_nfs_subdir._provision.os.chown") as chown:
        yield chown


def make_pvc(
    name: str = "data",
    namespace: str = "default",
    labels: dict[str, str] | None = None,
    annotations: dict[str, str] | None = None,
    selector: LabelSelector | None = None,
    size: str = "1Gi",
) -> PersistentVolumeClaim:
    """Create a claim with the given metadata."""
    return PersistentVolumeClaim(
        metadata=ObjectMeta(
            name=name, namespace=namespace, labels=labels, annotations=annotations
        ),
        spec=PersistentVolumeClaimSpec(
            storageClassName=STORAGE_CLASS_NAME,
            accessModes=["ReadWriteMany"],
            resources=VolumeResourceRequirements(requests={"storage": size}),
            selector=selector,
        ),
    )


def make_storage_class(
    parameters: dict[str, str] | None = None,
    reclaim_policy: str | None = "Delete",
    mount_options: list[str] | None = None,
) -> StorageClass:
    """Create a storage class served by this provisioner."""
    return StorageClass(
        provisioner=PROVISIONER_NAME,
        metadata=ObjectMeta(name=STORAGE_CLASS_NAME),
        parameters=parameters,
        reclaimPolicy=reclaim_policy,
        mountOptions=mount_options,
    )


def make_options(
    pvc: PersistentVolumeClaim | None = None,
    storage_class: StorageClass | None = None,
    pv_name: str = "pvc-1234",
) -> ProvisionOptions:
    """Create provision options for a claim and storage class."""
    return ProvisionOptions(
        pv_name=pv_name,
        pvc=pvc or make_pvc(),
        storage_class=storage_class or make_storage_class(),
    )


def make_pv(
    path: str,
    name: str = "pvc-1234",
    storage_class_name: str | None = STORAGE_CLASS_NAME,
    annotations: dict[str, str] | None = None,
) -> PersistentVolume:
    """Create an NFS PV pointing at ``path`` on the export."""
    return PersistentVolume(
        metadata=ObjectMeta(name=name, annotations=annotations),
        spec=PersistentVolumeSpec(
            storageClassName=storage_class_name,
            nfs=NFSVolumeSource(server=NFS_SERVER, path=path),
        ),
    )
