# Copyright 2025 The NFS Subdir Provisioner Project
# See LICENSE file for licensing details.

"""Directory creation, permissions and ownership for new volumes."""

import logging
import os

from _nfs_subdir._config import ProvisionerConfig
from _nfs_subdir._constants import GID_ANNOTATION, MODE_ANNOTATION, UID_ANNOTATION
from _nfs_subdir._errors import (
    InvalidParameterError,
    ProvisioningState,
    StorageIOError,
    UnsupportedSelectorError,
)
from _nfs_subdir._interface import ProvisionedVolume, ProvisionOptions
from _nfs_subdir._metadata import PvcMetadata
from _nfs_subdir._params import parse_id, parse_mode
from _nfs_subdir._paths import build_paths

logger = logging.getLogger(__name__)


def resolve_mode(metadata: PvcMetadata, default_mode: int) -> int:
    """Directory mode requested by the claim, or the process default."""
    pvc_mode = metadata.annotations.get(MODE_ANNOTATION, "")
    if pvc_mode == "":
        return default_mode
    try:
        return parse_mode(pvc_mode)
    except InvalidParameterError as e:
        raise InvalidParameterError(f"invalid directoryMode {pvc_mode}: {e}") from e


def resolve_id(metadata: PvcMetadata, annotation: str, default_id: int) -> int:
    """Owner id requested by the claim, or ``default_id``.

    The directory already exists when this runs, so an invalid value is
    logged and replaced by the default instead of failing the provision.
    """
    pvc_id = metadata.annotations.get(annotation, "")
    if pvc_id == "":
        return default_id
    try:
        return parse_id(pvc_id)
    except InvalidParameterError as e:
        logger.error("invalid %s %s: %s", annotation, pvc_id, e)
        return default_id


def make_dirs(path: str, mode: int) -> None:
    """Create ``path`` and every missing parent, each with ``mode``.

    Existing directories are left alone. The umask still applies.
    """
    missing = []
    current = path
    while current and not os.path.isdir(current):
        missing.append(current)
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent

    for directory in reversed(missing):
        try:
            os.mkdir(directory, mode)
        except FileExistsError:
            if not os.path.isdir(directory):
                raise


def provision_volume(options: ProvisionOptions, config: ProvisionerConfig) -> ProvisionedVolume:
    """Create and prepare the directory backing a claim.

    Raises:
        UnsupportedSelectorError: The claim has a selector.
        InvalidParameterError: The mode annotation is invalid.
        StorageIOError: Creating the directory or setting its mode or owner failed.
    """
    pvc = options.pvc
    if pvc.spec is not None and pvc.spec.selector is not None:
        raise UnsupportedSelectorError()
    logger.debug("nfs provisioner: provision options %s", options)

    metadata = PvcMetadata.from_claim(pvc)
    paths = build_paths(
        config.export_path,
        config.mount_root,
        metadata,
        options.pv_name,
        options.parameters,
    )

    mode = resolve_mode(metadata, config.default_mode)

    logger.debug("creating path %s", paths.local_path)
    try:
        make_dirs(paths.local_path, mode)
    except OSError as e:
        raise StorageIOError(f"unable to create directory to provision new pv: {e}") from e

    # mkdir is subject to the process umask
    try:
        os.chmod(paths.local_path, mode)
    except OSError as e:
        raise StorageIOError(
            f"unable to set mode {mode:o} on {paths.local_path}: {e}",
            state=ProvisioningState.UNKNOWN,
        ) from e

    uid = resolve_id(metadata, UID_ANNOTATION, config.default_uid)
    gid = resolve_id(metadata, GID_ANNOTATION, config.default_gid)
    try:
        os.chown(paths.local_path, uid, gid)
    except OSError as e:
        raise StorageIOError(
            f"unable to set owner {uid}:{gid} on {paths.local_path}: {e}",
            state=ProvisioningState.UNKNOWN,
        ) from e

    logger.info(
        "Provisioned %s for claim %s/%s (mode %o, owner %d:%d)",
        paths.server_path,
        metadata.namespace,
        metadata.name,
        mode,
        uid,
        gid,
    )
    return ProvisionedVolume(
        server=config.server, path=paths.server_path, local_path=paths.local_path
    )
