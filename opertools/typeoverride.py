"""Override types that mirror workload objects with every field optional.

These types are meant to be embedded in custom resources so that users can
supply partial overrides for objects an operator creates. Nested Kubernetes
structures that are not redefined here (service specs, strategies, volumes,
containers and the like) are kept as plain mappings in their JSON form.

``to_dict`` renders an override into its JSON form. Empty optional values are
left out. Nested structures that are not optional are always written, even
when empty. ``from_dict`` builds an override from that form and ignores keys
it does not know.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, TypeVar

from opertools.basetypes import MetaBase

T = TypeVar("T")

# How a field is left out of the JSON form.
_OMIT_EMPTY = "empty"  # left out when None or empty/zero/false
_OMIT_NONE = "none"  # left out only when None (optional values)
_OMIT_NEVER = "never"  # always written (nested structures)


def _field(
    key: str,
    default: Any = None,
    *,
    factory: Any = None,
    omit: str = _OMIT_EMPTY,
    nested: type | None = None,
    many: bool = False,
) -> Any:
    meta = {"json": key, "omit": omit, "nested": nested, "many": many}
    if factory is not None:
        return field(default_factory=factory, metadata=meta)
    return field(default=default, metadata=meta)


def _struct(key: str, nested: type | None = None) -> Any:
    return _field(key, factory=nested or dict, omit=_OMIT_NEVER, nested=nested)


def _optional(key: str) -> Any:
    return _field(key, None, omit=_OMIT_NONE)


def _list(key: str, nested: type | None = None) -> Any:
    return _field(key, factory=list, nested=nested, many=nested is not None)


def _map(key: str) -> Any:
    return _field(key, factory=dict)


def _is_omitted(value: Any, omit: str) -> bool:
    if value is None:
        return True
    if omit == _OMIT_EMPTY:
        return not value
    return False


def to_dict(obj: Any) -> dict[str, Any]:
    """Render an override object into its JSON form."""
    if not is_dataclass(obj) or isinstance(obj, type):
        raise TypeError(f"expected an override object, got {type(obj).__name__}")
    result: dict[str, Any] = {}
    for item in fields(obj):
        meta = item.metadata
        value = getattr(obj, item.name)
        if _is_omitted(value, meta["omit"]):
            continue
        if meta["nested"] is not None:
            if meta["many"]:
                value = [to_dict(entry) for entry in value]
            else:
                value = to_dict(value)
        else:
            value = copy.deepcopy(value)
        result[meta["json"]] = value
    return result


def from_dict(cls: type[T], data: Mapping[str, Any] | None) -> T:
    """Build an override of type ``cls`` from its JSON form."""
    if not is_dataclass(cls) or not isinstance(cls, type):
        raise TypeError(f"expected an override type, got {cls!r}")
    if data is None:
        return cls()
    if not isinstance(data, Mapping):
        raise TypeError(
            f"{cls.__name__} expects a mapping, got {type(data).__name__}"
        )
    kwargs: dict[str, Any] = {}
    for item in fields(cls):
        meta = item.metadata
        value = data.get(meta["json"])
        if value is None:
            continue
        nested = meta["nested"]
        if nested is not None:
            if meta["many"]:
                if not isinstance(value, list):
                    raise TypeError(
                        f"{cls.__name__}.{meta['json']} expects a list, "
                        f"got {type(value).__name__}"
                    )
                value = [from_dict(nested, entry) for entry in value]
            else:
                value = from_dict(nested, value)
        else:
            value = copy.deepcopy(value)
        kwargs[item.name] = value
    return cls(**kwargs)


@dataclass
class ObjectMeta:
    """Annotations and labels of an object."""

    annotations: dict[str, str] = _map("annotations")
    labels: dict[str, str] = _map("labels")

    def merge(self, meta: Mapping[str, Any] | None) -> dict[str, Any]:
        """Return ``meta`` with these annotations and labels added or replaced."""
        return MetaBase(annotations=self.annotations, labels=self.labels).merge(meta)


@dataclass
class Service:
    """Service metadata and spec."""

    metadata: ObjectMeta = _struct("metadata", ObjectMeta)
    spec: dict[str, Any] = _struct("spec")


@dataclass
class IngressExtensionsV1beta1:
    """Ingress metadata and spec in the deprecated extensions API group."""

    metadata: ObjectMeta = _struct("metadata", ObjectMeta)
    spec: dict[str, Any] = _struct("spec")


@dataclass
class IngressNetworkingV1beta1:
    """Ingress metadata and spec in the networking API group."""

    metadata: ObjectMeta = _struct("metadata", ObjectMeta)
    spec: dict[str, Any] = _struct("spec")


@dataclass
class PodSpec:
    """Pod spec in which containers may be missing."""

    volumes: list[dict[str, Any]] = _list("volumes")
    init_containers: list[dict[str, Any]] = _list("initContainers")
    containers: list[dict[str, Any]] = _list("containers")
    ephemeral_containers: list[dict[str, Any]] = _list("ephemeralContainers")
    restart_policy: str = _field("restartPolicy", "")
    termination_grace_period_seconds: int | None = _optional(
        "terminationGracePeriodSeconds"
    )
    active_deadline_seconds: int | None = _optional("activeDeadlineSeconds")
    dns_policy: str = _field("dnsPolicy", "")
    node_selector: dict[str, str] = _map("nodeSelector")
    service_account_name: str = _field("serviceAccountName", "")
    automount_service_account_token: bool | None = _optional(
        "automountServiceAccountToken"
    )
    node_name: str = _field("nodeName", "")
    host_network: bool = _field("hostNetwork", False)
    host_pid: bool = _field("hostPID", False)
    host_ipc: bool = _field("hostIPC", False)
    share_process_namespace: bool | None = _optional("shareProcessNamespace")
    security_context: dict[str, Any] | None = _optional("securityContext")
    image_pull_secrets: list[dict[str, Any]] = _list("imagePullSecrets")
    hostname: str = _field("hostname", "")
    subdomain: str = _field("subdomain", "")
    affinity: dict[str, Any] | None = _optional("affinity")
    scheduler_name: str = _field("schedulerName", "")
    tolerations: list[dict[str, Any]] = _list("tolerations")
    host_aliases: list[dict[str, Any]] = _list("hostAliases")
    priority_class_name: str = _field("priorityClassName", "")
    priority: int | None = _optional("priority")
    dns_config: dict[str, Any] | None = _optional("dnsConfig")
    readiness_gates: list[dict[str, Any]] = _list("readinessGates")
    runtime_class_name: str | None = _optional("runtimeClassName")
    enable_service_links: bool | None = _optional("enableServiceLinks")
    preemption_policy: str | None = _optional("preemptionPolicy")
    overhead: dict[str, Any] = _map("overhead")
    topology_spread_constraints: list[dict[str, Any]] = _list(
        "topologySpreadConstraints"
    )
    set_hostname_as_fqdn: bool | None = _optional("setHostnameAsFQDN")


@dataclass
class PodTemplateSpec:
    """Pod template with local metadata and pod spec."""

    metadata: ObjectMeta = _struct("metadata", ObjectMeta)
    spec: PodSpec = _struct("spec", PodSpec)


@dataclass
class DaemonSetSpec:
    """Daemon set spec with every field optional."""

    selector: dict[str, Any] | None = _optional("selector")
    template: PodTemplateSpec = _struct("template", PodTemplateSpec)
    update_strategy: dict[str, Any] = _struct("updateStrategy")
    min_ready_seconds: int = _field("minReadySeconds", 0)
    revision_history_limit: int | None = _optional("revisionHistoryLimit")


@dataclass
class DaemonSet:
    """Daemon set metadata and spec."""

    metadata: ObjectMeta = _struct("metadata", ObjectMeta)
    spec: DaemonSetSpec = _struct("spec", DaemonSetSpec)


@dataclass
class DeploymentSpec:
    """Deployment spec with every field optional."""

    replicas: int | None = _optional("replicas")
    selector: dict[str, Any] | None = _optional("selector")
    template: PodTemplateSpec = _struct("template", PodTemplateSpec)
    strategy: dict[str, Any] = _struct("strategy")
    min_ready_seconds: int = _field("minReadySeconds", 0)
    revision_history_limit: int | None = _optional("revisionHistoryLimit")
    paused: bool = _field("paused", False)
    progress_deadline_seconds: int | None = _optional("progressDeadlineSeconds")


@dataclass
class Deployment:
    """Deployment metadata and spec."""

    metadata: ObjectMeta = _struct("metadata", ObjectMeta)
    spec: DeploymentSpec = _struct("spec", DeploymentSpec)


@dataclass
class EmbeddedPersistentVolumeClaimObjectMeta:
    """Metadata of a persistent volume claim embedded in a stateful set."""

    name: str = _field("name", "")
    annotations: dict[str, str] = _map("annotations")
    labels: dict[str, str] = _map("labels")


@dataclass
class PersistentVolumeClaim:
    """Persistent volume claim metadata and spec."""

    metadata: EmbeddedPersistentVolumeClaimObjectMeta = _struct(
        "metadata", EmbeddedPersistentVolumeClaimObjectMeta
    )
    spec: dict[str, Any] = _struct("spec")


@dataclass
class StatefulSetSpec:
    """Stateful set spec with every field optional."""

    replicas: int | None = _optional("replicas")
    selector: dict[str, Any] | None = _optional("selector")
    template: PodTemplateSpec = _struct("template", PodTemplateSpec)
    volume_claim_templates: list[PersistentVolumeClaim] = _list(
        "volumeClaimTemplates", PersistentVolumeClaim
    )
    service_name: str = _field("serviceName", "")
    pod_management_policy: str = _field("podManagementPolicy", "")
    update_strategy: dict[str, Any] = _struct("updateStrategy")
    revision_history_limit: int | None = _optional("revisionHistoryLimit")


@dataclass
class StatefulSet:
    """Stateful set metadata and spec."""

    metadata: ObjectMeta = _struct("metadata", ObjectMeta)
    spec: StatefulSetSpec = _struct("spec", StatefulSetSpec)


@dataclass
class ServiceAccount:
    """Service account metadata, secrets and token settings."""

    metadata: ObjectMeta = _struct("metadata", ObjectMeta)
    secrets: list[dict[str, Any]] = _list("secrets")
    image_pull_secrets: list[dict[str, Any]] = _list("imagePullSecrets")
    automount_service_account_token: bool | None = _optional(
        "automountServiceAccountToken"
    )