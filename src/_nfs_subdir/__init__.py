# Copyright 2025 The NFS Subdir Provisioner Project
# See LICENSE file for licensing details.

"""NFS subdirectory provisioning logic."""

from _nfs_subdir._config import ProvisionerConfig
from _nfs_subdir._delete import DeletionPolicy, delete_volume, deletion_policy
from _nfs_subdir._errors import (
    ClassLookupError,
    ConfigError,
    InvalidParameterError,
    ProvisionerError,
    ProvisioningState,
    StorageIOError,
    UnsupportedSelectorError,
)
from _nfs_subdir._interface import ProvisionedVolume, Provisioner, ProvisionOptions
from _nfs_subdir._k8s import build_nfs_pv, create_client, get_class_for_volume
from _nfs_subdir._metadata import PvcMetadata, resolve_template
from _nfs_subdir._params import parse_bool, parse_id, parse_mode
from _nfs_subdir._paths import VolumePaths, build_paths, local_path_for
from _nfs_subdir._provision import provision_volume

__all__ = [
    "ClassLookupError",
    "ConfigError",
    "DeletionPolicy",
    "InvalidParameterError",
    "ProvisionOptions",
    "ProvisionedVolume",
    "Provisioner",
    "ProvisionerConfig",
    "ProvisionerError",
    "ProvisioningState",
    "PvcMetadata",
    "StorageIOError",
    "UnsupportedSelectorError",
    "VolumePaths",
    "build_nfs_pv",
    "build_paths",
    "create_client",
    "delete_volume",
    "deletion_policy",
    "get_class_for_volume",
    "local_path_for",
    "parse_bool",
    "parse_id",
    "parse_mode",
    "provision_volume",
    "resolve_template",
]
