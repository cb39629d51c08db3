# Copyright 2025 The NFS Subdir Provisioner Project
# See LICENSE file for licensing details.

"""Server-visible and local path construction for provisioned directories."""

import posixpath
from collections.abc import Mapping
from typing import NamedTuple

from _nfs_subdir._constants import PATH_PATTERN_PARAM
from _nfs_subdir._metadata import PvcMetadata, resolve_template


class VolumePaths(NamedTuple):
    """Same directory as seen from the NFS server and from this process."""

    server_path: str
    local_path: str


def join_under(root: str, suffix: str) -> str:
    """Join ``suffix`` beneath ``root`` and normalize the result.

    A leading slash in ``suffix`` does not replace ``root``.
    """
    if not suffix:
        return posixpath.normpath(root) if root else ""
    if not root:
        return posixpath.normpath(suffix)
    return posixpath.normpath(posixpath.join(root, suffix.lstrip("/")))


def default_suffix(metadata: PvcMetadata, pv_name: str) -> str:
    """Directory name used when no custom path pattern applies."""
    return "-".join([metadata.namespace, metadata.name, pv_name])


def build_paths(
    export_path: str,
    mount_root: str,
    metadata: PvcMetadata,
    pv_name: str,
    parameters: Mapping[str, str],
) -> VolumePaths:
    """Build the server and local paths for a new volume.

    An empty ``pathPattern`` expansion falls back to the default suffix.
    """
    suffix = default_suffix(metadata, pv_name)

    if PATH_PATTERN_PARAM in parameters:
        custom = resolve_template(parameters[PATH_PATTERN_PARAM], metadata)
        if custom != "":
            suffix = custom

    return VolumePaths(
        server_path=join_under(export_path, suffix),
        local_path=join_under(mount_root, suffix),
    )


def local_path_for(server_path: str, export_path: str, mount_root: str) -> str:
    """Map a server-visible path back onto the local mount root."""
    return server_path.replace(export_path, mount_root, 1)
