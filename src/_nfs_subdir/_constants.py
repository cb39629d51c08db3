# Copyright 2025 The NFS Subdir Provisioner Project
# See LICENSE file for licensing details.

"""Constants shared by the provisioner modules."""

MOUNT_PATH = "/persistentvolumes"
ANNOTATION_PREFIX = "k8s-sigs.io"

MODE_ANNOTATION = f"{ANNOTATION_PREFIX}/nfs-directory-mode"
UID_ANNOTATION = f"{ANNOTATION_PREFIX}/nfs-directory-uid"
GID_ANNOTATION = f"{ANNOTATION_PREFIX}/nfs-directory-gid"

PATH_PATTERN_PARAM = "pathPattern"
ON_DELETE_PARAM = "onDelete"
ARCHIVE_ON_DELETE_PARAM = "archiveOnDelete"

ARCHIVE_PREFIX = "archived-"

DEFAULT_MODE = 0o777
MAX_MODE = 0o777
MAX_ID = 65535

BETA_STORAGE_CLASS_ANNOTATION = "volume.beta.kubernetes.io/storage-class"
