#!/usr/bin/env python3
# Copyright 2025 The NFS Subdir Provisioner Project
# See LICENSE file for licensing details.

"""NFS subdirectory provisioner - realizes claims as directories on a shared export."""

import logging
import os
import sys
from collections.abc import Mapping

from lightkube import Client
from lightkube.resources.core_v1 import PersistentVolume
from lightkube.resources.storage_v1 import StorageClass

from _nfs_subdir import (
    ConfigError,
    Provisioner,
    ProvisionerConfig,
    ProvisioningState,
    ProvisionOptions,
    build_nfs_pv,
    create_client,
    delete_volume,
    get_class_for_volume,
    provision_volume,
)

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class NFSSubdirProvisioner(Provisioner):
    """Provisioner that maps each claim onto a subdirectory of one NFS export."""

    def __init__(self, config: ProvisionerConfig, client: Client | None = None) -> None:
        self.config = config
        self._client = client

    @property
    def client(self) -> Client | None:
        """Kubernetes client used for storage class lookups."""
        return self._client

    def provision(
        self, options: ProvisionOptions
    ) -> tuple[PersistentVolume, ProvisioningState]:
        """Create the claim's directory and return the PV describing it."""
        volume = provision_volume(options, self.config)
        return build_nfs_pv(options, volume), ProvisioningState.FINISHED

    def delete(self, volume: PersistentVolume) -> None:
        """Delete, retain or archive the PV's directory per its storage class."""
        delete_volume(volume, self.config, self._get_class_for_volume)

    def _get_class_for_volume(self, volume: PersistentVolume) -> StorageClass:
        return get_class_for_volume(self._client, volume)


def load_provisioner(environ: Mapping[str, str] | None = None) -> NFSSubdirProvisioner:
    """Build a provisioner from environment configuration.

    Raises:
        ConfigError: Configuration is incomplete or the Kubernetes client
            cannot be configured.
    """
    config = ProvisionerConfig.from_env(environ)
    client = create_client(config.kubeconfig)
    return NFSSubdirProvisioner(config, client)


def main(environ: Mapping[str, str] | None = None) -> int:
    """Validate startup configuration and build the provisioner.

    Returns a non-zero exit code when configuration is unusable; the host
    controller owns everything after a provisioner has been built.
    """
    env = os.environ if environ is None else environ
    level = env.get(LOG_LEVEL_ENV, "INFO").upper()
    if level not in LOG_LEVELS:
        level = "INFO"
    logging.basicConfig(level=level, format=LOG_FORMAT)

    try:
        provisioner = load_provisioner(env)
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    config = provisioner.config
    logger.info(
        "Provisioner %s ready for %s:%s (mount %s, leader election %s)",
        config.provisioner_name,
        config.server,
        config.export_path,
        config.mount_root,
        "enabled" if config.leader_election else "disabled",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
