"""Ordering of Kubernetes objects for install and uninstall."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from typing import Any

ScoreFunc = Callable[[Mapping[str, Any]], int]


class ResourceOrder(str, Enum):
    """Which ordering to apply when sorting objects."""

    INSTALL = "Install"
    UNINSTALL = "Uninstall"


_INSTALL_ORDER = (
    "CustomResourceDefinition",
    "Namespace",
    "ResourceQuota",
    "LimitRange",
    "PodSecurityPolicy",
    "PodDisruptionBudget",
    "Secret",
    "ConfigMap",
    "StorageClass",
    "PersistentVolume",
    "PersistentVolumeClaim",
    "ServiceAccount",
    "ClusterRole",
    "ClusterRoleList",
    "ClusterRoleBinding",
    "ClusterRoleBindingList",
    "Role",
    "RoleList",
    "RoleBinding",
    "RoleBindingList",
    "Service",
    "DaemonSet",
    "Pod",
    "ReplicationController",
    "ReplicaSet",
    "Deployment",
    "HorizontalPodAutoscaler",
    "StatefulSet",
    "Job",
    "CronJob",
    "Ingress",
    "APIService",
    "ValidatingWebhookConfiguration",
    "MutatingWebhookConfiguration",
)

_UNINSTALL_ORDER = (
    "MutatingWebhookConfiguration",
    "ValidatingWebhookConfiguration",
    "APIService",
    "Ingress",
    "Service",
    "CronJob",
    "Job",
    "StatefulSet",
    "HorizontalPodAutoscaler",
    "Deployment",
    "ReplicaSet",
    "ReplicationController",
    "Pod",
    "DaemonSet",
    "RoleBindingList",
    "RoleBinding",
    "RoleList",
    "Role",
    "ClusterRoleBindingList",
    "ClusterRoleBinding",
    "ClusterRoleList",
    "ClusterRole",
    "ServiceAccount",
    "PersistentVolumeClaim",
    "PersistentVolume",
    "StorageClass",
    "ConfigMap",
    "Secret",
    "PodDisruptionBudget",
    "PodSecurityPolicy",
    "LimitRange",
    "ResourceQuota",
    "Policy",
    "Gateway",
    "VirtualService",
    "DestinationRule",
    "Handler",
    "Instance",
    "Rule",
    "Namespace",
    "CustomResourceDefinition",
)


def _kind(obj: Mapping[str, Any]) -> str:
    return obj.get("kind") or ""


def _group(obj: Mapping[str, Any]) -> str:
    api_version = obj.get("apiVersion") or ""
    group, sep, _ = api_version.rpartition("/")
    return group if sep else ""


def _name(obj: Mapping[str, Any]) -> str:
    meta = obj.get("metadata")
    if isinstance(meta, Mapping):
        return meta.get("name") or ""
    return ""


def _scorer(kinds: tuple[str, ...], missing: int) -> ScoreFunc:
    ranks = {kind: rank for rank, kind in enumerate(kinds)}

    def score(obj: Mapping[str, Any]) -> int:
        return ranks.get(_kind(obj), missing)

    return score


def install_object_order() -> ScoreFunc:
    """Return a score function for install order; unknown kinds come last."""
    return _scorer(_INSTALL_ORDER, 1000)


def uninstall_object_order() -> ScoreFunc:
    """Return a score function for uninstall order; unknown kinds come first."""
    return _scorer(_UNINSTALL_ORDER, 0)


def sort_objects(
    objects: Iterable[Mapping[str, Any]], order: ResourceOrder | str | None
) -> list[Mapping[str, Any]]:
    """Return objects sorted by order score, then API group, kind and name."""
    try:
        resolved = ResourceOrder(order)
    except ValueError:
        resolved = None

    if resolved is ResourceOrder.INSTALL:
        score = install_object_order()
    elif resolved is ResourceOrder.UNINSTALL:
        score = uninstall_object_order()
    else:
        # No ranked kinds: every object scores equally.
        score = _scorer((), 0)

    return sorted(
        objects, key=lambda obj: (score(obj), _group(obj), _kind(obj), _name(obj))
    )