"""Volume settings that can be rendered into pod specs and stateful sets.

Pod specs, stateful set specs and volume sources are plain mappings in their
JSON form. The ``apply_*`` methods change the spec they are given in place.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any


class VolumeError(Exception):
    """Raised when a volume cannot be built or attached."""


@dataclass
class PersistentVolumeClaim:
    """A claim spec together with the volume source that refers to it."""

    spec: dict[str, Any] = field(default_factory=dict)
    source: dict[str, Any] = field(default_factory=dict)

    @property
    def claim_name(self) -> str:
        """Name of the claim given in the source."""
        return self.source.get("claimName") or ""


def _optional_mapping(data: Mapping[str, Any], key: str) -> dict[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise TypeError(f"{key} expects a mapping, got {type(value).__name__}")
    return copy.deepcopy(dict(value))


def _find_container(
    containers: list[dict[str, Any]], name: str
) -> dict[str, Any] | None:
    return next((c for c in containers if c.get("name", "") == name), None)


@dataclass
class KubernetesVolume:
    """A host path, empty dir or persistent volume claim to mount into pods."""

    host_path_legacy: dict[str, Any] | None = None
    host_path: dict[str, Any] | None = None
    empty_dir: dict[str, Any] | None = None
    persistent_volume_claim: PersistentVolumeClaim | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> KubernetesVolume:
        """Build a volume from its JSON form."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise TypeError(f"expected a mapping, got {type(data).__name__}")
        pvc_data = _optional_mapping(data, "pvc")
        pvc = None
        if pvc_data is not None:
            pvc = PersistentVolumeClaim(
                spec=_optional_mapping(pvc_data, "spec") or {},
                source=_optional_mapping(pvc_data, "source") or {},
            )
        return cls(
            host_path_legacy=_optional_mapping(data, "host_path"),
            host_path=_optional_mapping(data, "hostPath"),
            empty_dir=_optional_mapping(data, "emptyDir"),
            persistent_volume_claim=pvc,
        )

    def with_default_host_path(self, path: str) -> None:
        """Use ``path`` for a host path volume that has no path of its own."""
        if self.host_path is not None and not self.host_path.get("path"):
            self.host_path["path"] = path

    def get_volume(self, name: str) -> dict[str, Any]:
        """Return a volume named ``name``; an empty dir if nothing is configured."""
        if self.host_path_legacy is not None:
            raise VolumeError(
                "legacy host_path field is not supported anymore, "
                "please migrate to hostPath"
            )
        volume: dict[str, Any] = {"name": name}
        if self.host_path is not None:
            volume["hostPath"] = copy.deepcopy(self.host_path)
        elif self.empty_dir is not None:
            volume["emptyDir"] = copy.deepcopy(self.empty_dir)
        elif self.persistent_volume_claim is not None:
            volume["persistentVolumeClaim"] = copy.deepcopy(
                self.persistent_volume_claim.source
            )
        else:
            volume["emptyDir"] = {}
        return volume

    def apply_pvc_for_stateful_set(
        self,
        container_name: str,
        path: str,
        spec: dict[str, Any],
        meta: Callable[[str], Mapping[str, Any]],
    ) -> None:
        """Add a claim template to ``spec`` and mount it into the named container."""
        pvc_config = self.persistent_volume_claim
        if pvc_config is None:
            raise VolumeError("PVC definition is missing, unable to apply on statefulset")
        metadata = dict(meta(pvc_config.claim_name))
        pvc = {
            "metadata": metadata,
            "spec": copy.deepcopy(pvc_config.spec),
            "status": {"phase": "Pending"},
        }
        spec.setdefault("volumeClaimTemplates", []).append(pvc)

        containers = (
            (spec.get("template") or {}).get("spec") or {}
        ).get("containers") or []
        container = _find_container(containers, container_name)
        if container is None:
            raise VolumeError(
                f"failed to find container {container_name} "
                "to configure volume mount for the given PVC"
            )
        container.setdefault("volumeMounts", []).append(
            {"name": metadata.get("name") or "", "mountPath": path}
        )

    def apply_volume_for_pod_spec(
        self,
        volume_name: str,
        container_name: str,
        path: str,
        spec: dict[str, Any],
    ) -> None:
        """Add the volume to ``spec`` and mount it into the named container."""
        try:
            volume = self.get_volume(volume_name)
        except VolumeError as exc:
            raise VolumeError(
                f"failed to create volume definition for statefulset: {exc}"
            ) from exc
        spec.setdefault("volumes", []).append(volume)

        container = _find_container(spec.get("containers") or [], container_name)
        if container is None:
            raise VolumeError(
                f"failed to find container {container_name} to configure volume mount"
            )
        container.setdefault("volumeMounts", []).append(
            {"name": volume_name, "mountPath": path}
        )