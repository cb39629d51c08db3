# Copyright 2025 The NFS Subdir Provisioner Project
# See LICENSE file for licensing details.

"""Provisioner exceptions."""

from enum import Enum


class ProvisioningState(str, Enum):
    """Provisioning outcome reported back to the host controller."""

    FINISHED = "Finished"
    IN_BACKGROUND = "InBackground"
    NO_CHANGE = "NoChange"
    UNKNOWN = ""


class ProvisionerError(Exception):
    """Base exception for provisioner errors.

    ``state`` tells the host controller whether the operation may have left
    anything behind. ``FINISHED`` means nothing more will happen for this
    attempt; ``UNKNOWN`` means a directory may exist with the wrong mode or owner.
    """

    def __init__(
        self, message: str, state: ProvisioningState = ProvisioningState.FINISHED
    ) -> None:
        super().__init__(message)
        self.message = message
        self.state = state


class UnsupportedSelectorError(ProvisionerError):
    """Claim uses a label selector, which this provisioner cannot honour."""

    def __init__(self) -> None:
        super().__init__("claim Selector is not supported")


class InvalidParameterError(ProvisionerError, ValueError):
    """Mode, id or boolean parameter could not be parsed or is out of range."""


class ClassLookupError(ProvisionerError):
    """Storage class for a volume could not be retrieved."""


class StorageIOError(ProvisionerError):
    """A filesystem operation on the export failed."""


class ConfigError(ProvisionerError):
    """Process configuration is missing or invalid."""
