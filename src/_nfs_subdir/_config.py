# Copyright 2025 The NFS Subdir Provisioner Project
# See LICENSE file for licensing details.

"""Process-wide provisioner configuration, read once at startup."""

import os
import posixpath
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from _nfs_subdir._constants import DEFAULT_MODE, MAX_ID, MAX_MODE, MOUNT_PATH
from _nfs_subdir._errors import ConfigError, InvalidParameterError
from _nfs_subdir._params import parse_bool, parse_id, parse_mode

SERVER_ENV = "NFS_SERVER"
PATH_ENV = "NFS_PATH"
PROVISIONER_NAME_ENV = "PROVISIONER_NAME"
DEFAULT_MODE_ENV = "NFS_DEFAULT_MODE"
DEFAULT_UID_ENV = "NFS_DEFAULT_UID"
DEFAULT_GID_ENV = "NFS_DEFAULT_GID"
LEADER_ELECTION_ENV = "ENABLE_LEADER_ELECTION"
KUBECONFIG_ENV = "KUBECONFIG"


class ProvisionerConfig(BaseModel):
    """Export location, directory defaults and host settings."""

    model_config = ConfigDict(frozen=True)

    server: str = Field(min_length=1, description="NFS server address")
    export_path: str = Field(min_length=1, description="Exported base path on the server")
    provisioner_name: str = Field(min_length=1, description="Provisioner identity")
    mount_root: str = Field(
        default=MOUNT_PATH, description="Where the export is mounted inside this process"
    )
    default_mode: int = Field(default=DEFAULT_MODE, ge=0, le=MAX_MODE)
    default_uid: int = Field(default=0, ge=0, le=MAX_ID)
    default_gid: int = Field(default=0, ge=0, le=MAX_ID)
    leader_election: bool = True
    kubeconfig: str | None = None

    @field_validator("export_path", "mount_root")
    @classmethod
    def normalize_path(cls, value: str) -> str:
        """Strip trailing and duplicate slashes."""
        return posixpath.normpath(value) if value else value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ProvisionerConfig":
        """Load configuration from environment variables.

        Raises:
            ConfigError: A required variable is unset or a value does not parse.
        """
        env = os.environ if environ is None else environ

        server = env.get(SERVER_ENV, "")
        if not server:
            raise ConfigError(f"{SERVER_ENV} not set")
        export_path = env.get(PATH_ENV, "")
        if not export_path:
            raise ConfigError(f"{PATH_ENV} not set")
        provisioner_name = env.get(PROVISIONER_NAME_ENV, "")
        if not provisioner_name:
            raise ConfigError(
                f"environment variable {PROVISIONER_NAME_ENV} is not set! Please set it."
            )

        try:
            default_mode = parse_mode(env.get(DEFAULT_MODE_ENV, ""))
        except InvalidParameterError as e:
            raise ConfigError(f"Failed to parse {DEFAULT_MODE_ENV}: {e}") from e
        try:
            default_uid = parse_id(env.get(DEFAULT_UID_ENV, ""))
        except InvalidParameterError as e:
            raise ConfigError(f"Failed to parse {DEFAULT_UID_ENV}: {e}") from e
        try:
            default_gid = parse_id(env.get(DEFAULT_GID_ENV, ""))
        except InvalidParameterError as e:
            raise ConfigError(f"Failed to parse {DEFAULT_GID_ENV}: {e}") from e

        leader_election = True
        if leader_election_env := env.get(LEADER_ELECTION_ENV, ""):
            try:
                leader_election = parse_bool(leader_election_env)
            except InvalidParameterError as e:
                raise ConfigError(f"Unable to parse {LEADER_ELECTION_ENV} env var: {e}") from e

        try:
            return cls(
                server=server,
                export_path=export_path,
                provisioner_name=provisioner_name,
                default_mode=default_mode,
                default_uid=default_uid,
                default_gid=default_gid,
                leader_election=leader_election,
                kubeconfig=env.get(KUBECONFIG_ENV) or None,
            )
        except ValidationError as e:
            raise ConfigError(f"Invalid provisioner configuration: {e}") from e
