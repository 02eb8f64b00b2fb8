"""Common status types, label keys and legacy override types for workload objects.

Workload objects (deployments, stateful sets, daemon sets, pod specs, containers
and label selectors) are plain mappings in their JSON form. Every ``override``
and ``merge`` leaves its input untouched and returns a new mapping.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

NAME_LABEL = "app.kubernetes.io/name"
INSTANCE_LABEL = "app.kubernetes.io/instance"
VERSION_LABEL = "app.kubernetes.io/version"
COMPONENT_LABEL = "app.kubernetes.io/component"
MANAGED_BY_LABEL = "app.kubernetes.io/managed-by"

BANZAI_CLOUD_MANAGED_COMPONENT = "banzaicloud.io/managed-component"
BANZAI_CLOUD_OWNED_BY = "banzaicloud.io/owned-by"
BANZAI_CLOUD_RELATED_TO = "banzaicloud.io/related-to"
BANZAI_CLOUD_DESIRED_STATE_CREATED = "banzaicloud.io/desired-state-created"


@dataclass(frozen=True)
class ObjectKey:
    """Name and namespace of an object."""

    name: str = ""
    namespace: str = ""


class ReconcileStatus(str, Enum):
    """Reconciliation state of a component or of a whole resource."""

    FAILED = "Failed"
    RECONCILING = "Reconciling"
    AVAILABLE = "Available"
    UNMANAGED = "Unmanaged"
    REMOVED = "Removed"
    SUCCEEDED = "Succeeded"
    PENDING = "Pending"

    def stable(self) -> bool:
        """True for Available, Unmanaged and Removed."""
        return self in _STABLE

    def available(self) -> bool:
        """True for Available and Succeeded."""
        return self in (ReconcileStatus.AVAILABLE, ReconcileStatus.SUCCEEDED)

    def failed(self) -> bool:
        """True for Failed."""
        return self is ReconcileStatus.FAILED

    def pending(self) -> bool:
        """True for Reconciling and Pending."""
        return self in (ReconcileStatus.RECONCILING, ReconcileStatus.PENDING)


_STABLE = frozenset(
    {ReconcileStatus.AVAILABLE, ReconcileStatus.UNMANAGED, ReconcileStatus.REMOVED}
)
_STABLE_VALUES = frozenset(status.value for status in _STABLE)


def aggregated_state(
    component_statuses: Iterable[ReconcileStatus | str | None],
) -> ReconcileStatus:
    """Compute an overall status from component statuses; empty ones count as stable."""
    seen: set[str] = set()
    has_unstable = False
    for status in component_statuses:
        value = status.value if isinstance(status, ReconcileStatus) else (status or "")
        if value:
            seen.add(value)
            if value not in _STABLE_VALUES:
                has_unstable = True

    if not has_unstable:
        return ReconcileStatus.SUCCEEDED
    if ReconcileStatus.FAILED.value in seen:
        return ReconcileStatus.FAILED
    return ReconcileStatus.RECONCILING


@dataclass
class EnabledComponent:
    """A component that may be explicitly enabled, disabled, or left unset."""

    enabled: bool | None = None

    def is_disabled(self) -> bool:
        """True only if the component is explicitly disabled."""
        return self.enabled is not None and not self.enabled

    def is_enabled(self) -> bool:
        """True only if the component is explicitly enabled."""
        return bool(self.enabled)

    def is_skipped(self) -> bool:
        """True if the component is neither enabled nor disabled explicitly."""
        return self.enabled is None


def _copy(obj: Mapping[str, Any] | None) -> dict[str, Any]:
    return copy.deepcopy(dict(obj)) if obj else {}


def _put(target: dict[str, Any], key: str, value: Any) -> None:
    """Store ``value`` under ``key``, dropping the key for empty values."""
    if value:
        target[key] = value
    else:
        target.pop(key, None)


def merge_selectors(
    base: Mapping[str, Any] | None, spec: Mapping[str, Any] | None
) -> dict[str, Any] | None:
    """Merge match labels and append match expressions of ``base`` into ``spec``."""
    result = copy.deepcopy(dict(spec)) if spec is not None else None
    if base is None:
        return result

    labels = base.get("matchLabels")
    if labels is not None:
        if result is None:
            result = {}
        result["matchLabels"] = {**(result.get("matchLabels") or {}), **labels}

    expressions = base.get("matchExpressions")
    if expressions is not None:
        if result is None:
            result = {}
        result["matchExpressions"] = list(result.get("matchExpressions") or []) + list(
            copy.deepcopy(expressions)
        )
    return result


@dataclass
class MetaBase:
    """Annotations and labels to merge into object metadata."""

    annotations: dict[str, str] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)

    def merge(self, meta: Mapping[str, Any] | None) -> dict[str, Any]:
        """Return ``meta`` with this object's annotations and labels added or replaced."""
        result = _copy(meta)
        if self.annotations:
            result["annotations"] = {**(result.get("annotations") or {}), **self.annotations}
        if self.labels:
            result["labels"] = {**(result.get("labels") or {}), **self.labels}
        return result


@dataclass
class ContainerBase:
    """Overrides applied to the container with the same name."""

    name: str = ""
    resources: dict[str, Any] | None = None
    image: str = ""
    pull_policy: str = ""
    command: list[str] = field(default_factory=list)
    volume_mounts: list[dict[str, Any]] = field(default_factory=list)
    security_context: dict[str, Any] | None = None
    liveness_probe: dict[str, Any] | None = None
    readiness_probe: dict[str, Any] | None = None

    def override(self, container: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``container`` with the set fields of this override applied."""
        result = _copy(container)
        if self.resources is not None:
            _put(result, "resources", copy.deepcopy(self.resources))
        if self.image:
            result["image"] = self.image
        if self.pull_policy:
            result["imagePullPolicy"] = self.pull_policy
        if self.command:
            result["command"] = list(self.command)
        if self.volume_mounts:
            result["volumeMounts"] = copy.deepcopy(self.volume_mounts)
        if self.security_context is not None:
            result["securityContext"] = copy.deepcopy(self.security_context)
        if self.liveness_probe is not None:
            result["livenessProbe"] = copy.deepcopy(self.liveness_probe)
        if self.readiness_probe is not None:
            _put(result, "livenessProbe", copy.deepcopy(self.liveness_probe))
        return result


def _override_containers(
    overrides: list[ContainerBase], containers: list[Mapping[str, Any]]
) -> list[dict[str, Any]]:
    result = [dict(container) for container in containers]
    for base_container in overrides:
        for position, original in enumerate(result):
            if original.get("name", "") == base_container.name:
                result[position] = base_container.override(original)
                break
    return result


@dataclass
class PodSpecBase:
    """Overrides for a pod spec."""

    tolerations: list[dict[str, Any]] | None = None
    node_selector: dict[str, str] | None = None
    service_account_name: str = ""
    affinity: dict[str, Any] | None = None
    security_context: dict[str, Any] | None = None
    volumes: list[dict[str, Any]] = field(default_factory=list)
    priority_class_name: str = ""
    containers: list[ContainerBase] = field(default_factory=list)
    init_containers: list[ContainerBase] = field(default_factory=list)
    image_pull_secrets: list[dict[str, Any]] = field(default_factory=list)

    def override(self, spec: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``spec`` with the set fields of this override applied."""
        result = _copy(spec)
        if self.security_context is not None:
            result["securityContext"] = copy.deepcopy(self.security_context)
        if self.tolerations is not None:
            result["tolerations"] = copy.deepcopy(self.tolerations)
        if self.node_selector is not None:
            result["nodeSelector"] = dict(self.node_selector)
        if self.service_account_name:
            result["serviceAccountName"] = self.service_account_name
        if self.affinity is not None:
            result["affinity"] = copy.deepcopy(self.affinity)
        if self.volumes:
            result["volumes"] = copy.deepcopy(self.volumes)
        if self.priority_class_name:
            result["priorityClassName"] = self.priority_class_name
        if self.containers:
            result["containers"] = _override_containers(
                self.containers, result.get("containers") or []
            )
        if self.init_containers:
            result["initContainers"] = _override_containers(
                self.init_containers, result.get("initContainers") or []
            )
        return result


@dataclass
class PodTemplateBase:
    """Overrides for a pod template: metadata and pod spec."""

    metadata: MetaBase | None = None
    pod_spec: PodSpecBase | None = None

    def override(self, template: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``template`` with metadata merged and pod spec overridden."""
        result = _copy(template)
        if self.metadata is not None:
            _put(result, "metadata", self.metadata.merge(result.get("metadata")))
        if self.pod_spec is not None:
            _put(result, "spec", self.pod_spec.override(result.get("spec") or {}))
        return result


def _apply_template(
    template: PodTemplateBase | None, result: dict[str, Any]
) -> None:
    if template is not None:
        _put(result, "template", template.override(result.get("template") or {}))


def _apply_selector(selector: Mapping[str, Any] | None, result: dict[str, Any]) -> None:
    merged = merge_selectors(selector, result.get("selector"))
    if merged is None:
        result.pop("selector", None)
    else:
        result["selector"] = merged


@dataclass
class DeploymentSpecBase:
    """Overrides for a deployment spec."""

    replicas: int | None = None
    selector: dict[str, Any] | None = None
    strategy: dict[str, Any] | None = None
    template: PodTemplateBase | None = None

    def override(self, spec: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``spec`` with replicas, selector, strategy and template applied."""
        result = _copy(spec)
        if self.replicas is not None:
            result["replicas"] = self.replicas
        _apply_selector(self.selector, result)
        if self.strategy is not None:
            _put(result, "strategy", copy.deepcopy(self.strategy))
        _apply_template(self.template, result)
        return result


@dataclass
class StatefulsetSpecBase:
    """Overrides for a stateful set spec."""

    replicas: int | None = None
    selector: dict[str, Any] | None = None
    pod_management_policy: str = ""
    update_strategy: dict[str, Any] | None = None
    template: PodTemplateBase | None = None

    def override(self, spec: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``spec`` with the set fields of this override applied."""
        result = _copy(spec)
        if self.replicas is not None:
            result["replicas"] = self.replicas
        _apply_selector(self.selector, result)
        if self.pod_management_policy:
            result["podManagementPolicy"] = self.pod_management_policy
        if self.update_strategy is not None:
            _put(result, "updateStrategy", copy.deepcopy(self.update_strategy))
        _apply_template(self.template, result)
        return result


@dataclass
class DaemonSetSpecBase:
    """Overrides for a daemon set spec."""

    selector: dict[str, Any] | None = None
    update_strategy: dict[str, Any] | None = None
    min_ready_seconds: int = 0
    revision_history_limit: int | None = None
    template: PodTemplateBase | None = None

    def override(self, spec: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``spec`` with the set fields of this override applied."""
        result = _copy(spec)
        _apply_selector(self.selector, result)
        if self.update_strategy is not None:
            _put(result, "updateStrategy", copy.deepcopy(self.update_strategy))
        if self.min_ready_seconds != 0:
            result["minReadySeconds"] = self.min_ready_seconds
        if self.revision_history_limit is not None:
            result["revisionHistoryLimit"] = self.revision_history_limit
        _apply_template(self.template, result)
        return result


def _override_workload(
    meta_base: MetaBase | None, spec: Any, obj: Mapping[str, Any]
) -> dict[str, Any]:
    result = _copy(obj)
    if meta_base is not None:
        _put(result, "metadata", meta_base.merge(result.get("metadata")))
    if spec is not None:
        _put(result, "spec", spec.override(result.get("spec") or {}))
    return result


@dataclass
class DeploymentBase:
    """Overrides for a deployment: metadata and spec."""

    meta_base: MetaBase | None = None
    spec: DeploymentSpecBase | None = None

    def override(self, deployment: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``deployment`` with metadata merged and spec overridden."""
        return _override_workload(self.meta_base, self.spec, deployment)


@dataclass
class StatefulSetBase:
    """Overrides for a stateful set: metadata and spec."""

    meta_base: MetaBase | None = None
    spec: StatefulsetSpecBase | None = None

    def override(self, stateful_set: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``stateful_set`` with metadata merged and spec overridden."""
        return _override_workload(self.meta_base, self.spec, stateful_set)


@dataclass
class DaemonSetBase:
    """Overrides for a daemon set: metadata and spec."""

    meta_base: MetaBase | None = None
    spec: DaemonSetSpecBase | None = None

    def override(self, daemon_set: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``daemon_set`` with metadata merged and spec overridden."""
        return _override_workload(self.meta_base, self.spec, daemon_set)