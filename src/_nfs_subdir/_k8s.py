# Copyright 2025 The NFS Subdir Provisioner Project
# See LICENSE file for licensing details.

"""Kubernetes lookups and PersistentVolume assembly."""

import logging

import httpx
from lightkube import ApiError, Client, KubeConfig
from lightkube.core.exceptions import ConfigError as KubeConfigError
from lightkube.models.core_v1 import NFSVolumeSource, PersistentVolumeSpec
from lightkube.models.meta_v1 import ObjectMeta
from lightkube.resources.core_v1 import PersistentVolume
from lightkube.resources.storage_v1 import StorageClass

from _nfs_subdir._constants import BETA_STORAGE_CLASS_ANNOTATION
from _nfs_subdir._errors import ClassLookupError, ConfigError
from _nfs_subdir._interface import ProvisionedVolume, ProvisionOptions

logger = logging.getLogger(__name__)

DEFAULT_RECLAIM_POLICY = "Delete"


def create_client(kubeconfig: str | None = None) -> Client:
    """Create a lightkube client from a kubeconfig file or the in-cluster service account."""
    try:
        if kubeconfig:
            config = KubeConfig.from_file(kubeconfig)
        else:
            config = KubeConfig.from_service_account()
    except (KubeConfigError, OSError, KeyError) as e:
        source = kubeconfig or "in-cluster service account"
        raise ConfigError(f"Failed to create kubeconfig from {source}: {e}") from e
    return Client(config=config)


def get_volume_class_name(pv: PersistentVolume) -> str:
    """Return the storage class name of a PV, preferring the beta annotation."""
    annotations = pv.metadata.annotations if pv.metadata else None
    if annotations and BETA_STORAGE_CLASS_ANNOTATION in annotations:
        return annotations[BETA_STORAGE_CLASS_ANNOTATION]
    if pv.spec and pv.spec.storageClassName:
        return pv.spec.storageClassName
    return ""


def get_class_for_volume(client: Client | None, pv: PersistentVolume) -> StorageClass:
    """Fetch the storage class that owns a PV."""
    if client is None:
        raise ClassLookupError("cannot get kube client")
    class_name = get_volume_class_name(pv)
    if not class_name:
        raise ClassLookupError("volume has no storage class")
    try:
        return client.get(StorageClass, class_name)
    except (ApiError, httpx.HTTPError) as e:
        raise ClassLookupError(f"failed to get storage class {class_name}: {e}") from e


def build_nfs_pv(options: ProvisionOptions, volume: ProvisionedVolume) -> PersistentVolume:
    """Describe a provisioned directory as an NFS-backed PersistentVolume."""
    pvc_spec = options.pvc.spec
    storage_class = options.storage_class

    requests = pvc_spec.resources.requests if pvc_spec and pvc_spec.resources else None
    capacity = {"storage": requests["storage"]} if requests and "storage" in requests else None

    pv = PersistentVolume(
        metadata=ObjectMeta(name=options.pv_name),
        spec=PersistentVolumeSpec(
            persistentVolumeReclaimPolicy=storage_class.reclaimPolicy or DEFAULT_RECLAIM_POLICY,
            accessModes=list(pvc_spec.accessModes or []) if pvc_spec else [],
            mountOptions=storage_class.mountOptions,
            capacity=capacity,
            storageClassName=storage_class.metadata.name if storage_class.metadata else None,
            nfs=NFSVolumeSource(server=volume.server, path=volume.path, readOnly=False),
        ),
    )

    logger.debug(
        "Built NFS PV %s with server %s, path %s", options.pv_name, volume.server, volume.path
    )
    return pv
