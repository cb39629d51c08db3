# Copyright 2025 The NFS Subdir Provisioner Project
# See LICENSE file for licensing details.

"""Unit tests for the provisioner entry point."""

import logging
from unittest.mock import MagicMock, patch

import pytest
from lightkube.models.meta_v1 import LabelSelector

from _nfs_subdir import (
    ClassLookupError,
    ConfigError,
    Provisioner,
    ProvisioningState,
    UnsupportedSelectorError,
)
from nfs_provisioner import NFSSubdirProvisioner, load_provisioner, main

from .conftest import EXPORT_PATH, NFS_SERVER, make_options, make_pvc, make_storage_class

BASE_ENV = {
    "NFS_SERVER": NFS_SERVER,
    "NFS_PATH": EXPORT_PATH,
    "PROVISIONER_NAME": "k8s-sigs.io/nfs-subdir-external-provisioner",
}


@pytest.fixture
def client():
    """Mock lightkube client."""
    return MagicMock()


@pytest.fixture
def provisioner(config, client):
    """Provisioner rooted at a temporary mount."""
    return NFSSubdirProvisioner(config, client)


def test_implements_provisioner_interface(provisioner):
    """The NFS provisioner is a Provisioner."""
    assert isinstance(provisioner, Provisioner)


def test_provision_returns_nfs_pv(provisioner, mount_root, mock_chown):
    """Provision creates the directory and returns a finished NFS PV."""
    pv, state = provisioner.provision(make_options(pv_name="pvc-42"))

    assert state == ProvisioningState.FINISHED
    assert pv.metadata.name == "pvc-42"
    assert pv.spec.nfs.server == NFS_SERVER
    assert pv.spec.nfs.path == f"{EXPORT_PATH}/default-data-pvc-42"
    assert (mount_root / "default-data-pvc-42").is_dir()


def test_provision_errors_propagate(provisioner, mock_chown):
    """Provision failures reach the host as exceptions."""
    pvc = make_pvc(selector=LabelSelector(matchLabels={"a": "b"}))

    with pytest.raises(UnsupportedSelectorError):
        provisioner.provision(make_options(pvc))


def test_provision_then_delete_round_trip(provisioner, client, mount_root, mock_chown):
    """A provisioned volume is archived by delete with default parameters."""
    pv, _ = provisioner.provision(make_options(pv_name="pvc-7"))
    client.get.return_value = make_storage_class()

    provisioner.delete(pv)

    assert not (mount_root / "default-data-pvc-7").exists()
    assert (mount_root / "archived-default-data-pvc-7").is_dir()


def test_delete_uses_client_for_class_lookup(provisioner, client, mount_root, mock_chown):
    """Delete looks up the PV's storage class through the client."""
    pv, _ = provisioner.provision(make_options())
    client.get.return_value = make_storage_class({"onDelete": "delete"})

    provisioner.delete(pv)

    client.get.assert_called_once()
    assert list(mount_root.iterdir()) == []


def test_delete_without_client_fails(config, mount_root, mock_chown):
    """Without a client, deleting an existing directory cannot resolve its class."""
    provisioner = NFSSubdirProvisioner(config)
    pv, _ = provisioner.provision(make_options())

    with pytest.raises(ClassLookupError):
        provisioner.delete(pv)


def test_load_provisioner_builds_client():
    """load_provisioner wires configuration and the Kubernetes client."""
    with patch("nfs_provisioner.create_client") as mock_create:
        provisioner = load_provisioner({**BASE_ENV, "KUBECONFIG": "/etc/kube/config"})

    mock_create.assert_called_once_with("/etc/kube/config")
    assert provisioner.client is mock_create.return_value
    assert provisioner.config.server == NFS_SERVER


def test_main_success():
    """main returns 0 with valid configuration."""
    with patch("nfs_provisioner.create_client"):
        assert main(BASE_ENV) == 0


def test_main_missing_configuration(caplog):
    """main returns 1 and logs when configuration is incomplete."""
    env = {k: v for k, v in BASE_ENV.items() if k != "NFS_SERVER"}

    with caplog.at_level(logging.ERROR):
        assert main(env) == 1

    assert "NFS_SERVER not set" in caplog.text


def test_main_client_failure():
    """main returns 1 when the Kubernetes client cannot be configured."""
    with patch("nfs_provisioner.create_client", side_effect=ConfigError("no kubeconfig")):
        assert main(BASE_ENV) == 1


def test_main_outside_cluster_without_kubeconfig():
    """main returns 1 when neither a kubeconfig nor the in-cluster environment exists."""
    with patch("_nfs_subdir._k8s.KubeConfig") as mock_config:
        mock_config.from_service_account.side_effect = KeyError("KUBERNETES_SERVICE_HOST")
        assert main(BASE_ENV) == 1
