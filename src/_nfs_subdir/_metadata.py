# Copyright 2025 The NFS Subdir Provisioner Project
# See LICENSE file for licensing details.

"""PVC metadata snapshot and path template resolution.

Templates reference claim metadata with ``${.PVC.name}``, ``${.PVC.namespace}``,
``${.PVC.labels.<key>}`` and ``${.PVC.annotations.<key>}``. Unknown fields and
missing keys resolve to an empty string. There is no escape syntax.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from lightkube.resources.core_v1 import PersistentVolumeClaim

PLACEHOLDER_PATTERN = re.compile(r"\$\{\.PVC\.((labels|annotations)\.(.*?)|.*?)\}")


@dataclass(frozen=True)
class PvcMetadata:
    """Immutable view of the claim fields available to path templates."""

    name: str
    namespace: str
    labels: Mapping[str, str] = field(default_factory=dict)
    annotations: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_claim(cls, pvc: PersistentVolumeClaim) -> "PvcMetadata":
        """Snapshot name, namespace, labels and annotations of a claim."""
        meta = pvc.metadata
        if meta is None:
            return cls(name="", namespace="")
        return cls(
            name=meta.name or "",
            namespace=meta.namespace or "",
            labels=dict(meta.labels or {}),
            annotations=dict(meta.annotations or {}),
        )

    @property
    def data(self) -> dict[str, str]:
        """Top-level fields addressable as ``${.PVC.<field>}``."""
        return {"name": self.name, "namespace": self.namespace}


def resolve_template(
    template: str,
    metadata: PvcMetadata,
    pattern: re.Pattern[str] = PLACEHOLDER_PATTERN,
) -> str:
    """Substitute every PVC placeholder in ``template`` with its value."""

    def _lookup(match: re.Match[str]) -> str:
        field_name, section, key = match.group(1), match.group(2), match.group(3)
        if section == "labels":
            return metadata.labels.get(key, "")
        if section == "annotations":
            return metadata.annotations.get(key, "")
        return metadata.data.get(field_name, "")

    return pattern.sub(_lookup, template)
