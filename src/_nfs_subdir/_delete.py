# Copyright 2025 The NFS Subdir Provisioner Project
# See LICENSE file for licensing details.

"""Deletion policy and removal, retention or archiving of volume directories."""

import logging
import os
import posixpath
import shutil
from collections.abc import Callable, Mapping
from enum import Enum

from lightkube.resources.core_v1 import PersistentVolume
from lightkube.resources.storage_v1 import StorageClass

from _nfs_subdir._config import ProvisionerConfig
from _nfs_subdir._constants import ARCHIVE_ON_DELETE_PARAM, ARCHIVE_PREFIX, ON_DELETE_PARAM
from _nfs_subdir._errors import InvalidParameterError, StorageIOError
from _nfs_subdir._params import parse_bool
from _nfs_subdir._paths import join_under, local_path_for

logger = logging.getLogger(__name__)


class DeletionPolicy(str, Enum):
    """What happens to a directory when its volume is deleted."""

    DELETE = "delete"
    RETAIN = "retain"
    ARCHIVE_TRUE = "archive"
    ARCHIVE_FALSE = "remove"


def deletion_policy(parameters: Mapping[str, str]) -> DeletionPolicy:
    """Derive the deletion policy from storage class parameters.

    A recognized ``onDelete`` value wins over ``archiveOnDelete``; anything
    else falls through to the archive setting, which defaults to archiving.
    """
    on_delete = parameters.get(ON_DELETE_PARAM, "")
    if on_delete == "delete":
        return DeletionPolicy.DELETE
    if on_delete == "retain":
        return DeletionPolicy.RETAIN

    if ARCHIVE_ON_DELETE_PARAM in parameters:
        value = parameters[ARCHIVE_ON_DELETE_PARAM]
        try:
            archive = parse_bool(value)
        except InvalidParameterError as e:
            raise InvalidParameterError(f"invalid {ARCHIVE_ON_DELETE_PARAM} {value!r}: {e}") from e
        if not archive:
            return DeletionPolicy.ARCHIVE_FALSE

    return DeletionPolicy.ARCHIVE_TRUE


def server_path_of(pv: PersistentVolume) -> str:
    """Server-visible path recorded in an NFS PV."""
    if pv.spec is None or pv.spec.nfs is None:
        name = pv.metadata.name if pv.metadata else ""
        raise InvalidParameterError(f"volume {name} has no NFS source")
    return pv.spec.nfs.path


def _remove_tree(path: str) -> bool:
    """Remove a directory tree, symlink or file. Returns False if it was already gone."""
    try:
        if os.path.islink(path) or not os.path.isdir(path):
            os.unlink(path)
        else:
            shutil.rmtree(path)
    except FileNotFoundError:
        logger.warning("path %s disappeared before removal", path)
        return False
    except OSError as e:
        raise StorageIOError(f"unable to remove {path}: {e}") from e
    return True


def _archive(path: str, archive_path: str) -> bool:
    logger.debug("archiving path %s to %s", path, archive_path)
    try:
        os.rename(path, archive_path)
    except FileNotFoundError as e:
        if os.path.lexists(path):
            raise StorageIOError(f"unable to archive {path} to {archive_path}: {e}") from e
        logger.warning("path %s disappeared before archiving", path)
        return False
    except OSError as e:
        raise StorageIOError(f"unable to archive {path} to {archive_path}: {e}") from e
    return True


def delete_volume(
    pv: PersistentVolume,
    config: ProvisionerConfig,
    lookup_class: Callable[[PersistentVolume], StorageClass],
) -> DeletionPolicy | None:
    """Apply the storage class deletion policy to a PV's directory.

    Returns the applied policy, or None when the directory was already gone.

    Raises:
        ClassLookupError: The storage class could not be fetched.
        InvalidParameterError: The PV has no NFS source or ``archiveOnDelete``
            does not parse.
        StorageIOError: Removing or renaming the directory failed.
    """
    server_path = server_path_of(pv)
    local_path = local_path_for(server_path, config.export_path, config.mount_root)

    try:
        os.stat(local_path)
    except FileNotFoundError:
        logger.warning("path %s does not exist, deletion skipped", local_path)
        return None
    except OSError as e:
        raise StorageIOError(f"unable to stat {local_path}: {e}") from e

    storage_class = lookup_class(pv)
    policy = deletion_policy(storage_class.parameters or {})

    if policy in (DeletionPolicy.DELETE, DeletionPolicy.ARCHIVE_FALSE):
        if _remove_tree(local_path):
            logger.info("Deleted %s", local_path)
    elif policy is DeletionPolicy.RETAIN:
        logger.info("Retained %s", local_path)
    else:
        archive_path = join_under(
            config.mount_root, ARCHIVE_PREFIX + posixpath.basename(server_path.rstrip("/"))
        )
        if _archive(local_path, archive_path):
            logger.info("Archived %s to %s", local_path, archive_path)

    return policy
