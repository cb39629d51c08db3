# Copyright 2025 The NFS Subdir Provisioner Project
# See LICENSE file for licensing details.

"""Contract between the provisioner and the host controller that drives it."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from lightkube.resources.core_v1 import PersistentVolume, PersistentVolumeClaim
from lightkube.resources.storage_v1 import StorageClass

from _nfs_subdir._errors import ProvisioningState


@dataclass(frozen=True)
class ProvisionOptions:
    """Everything the host knows about a claim that needs a volume."""

    pv_name: str
    pvc: PersistentVolumeClaim
    storage_class: StorageClass

    @property
    def parameters(self) -> dict[str, str]:
        """Storage class parameters, empty when the class defines none."""
        return dict(self.storage_class.parameters or {})


@dataclass(frozen=True)
class ProvisionedVolume:
    """Directory created for a claim, as the NFS server exports it."""

    server: str
    path: str
    local_path: str


class Provisioner(ABC):
    """Operations a host controller calls to realize and release volumes."""

    @abstractmethod
    def provision(
        self, options: ProvisionOptions
    ) -> tuple[PersistentVolume, ProvisioningState]:
        """Create backing storage for a claim and describe it as a PV.

        Raises:
            ProvisionerError: Provisioning failed; ``state`` tells the host
                whether anything may have been left behind.
        """

    @abstractmethod
    def delete(self, volume: PersistentVolume) -> None:
        """Release the backing storage of a PV according to its storage class.

        Raises:
            ProvisionerError: Deletion failed and may be retried.
        """
