"""Polling with exponential backoff until resources reach a condition.

Objects are mappings in their JSON form. A client is any object with a
``get(key, obj)`` method that returns the current state of ``obj`` under the
given ``NamespacedName`` key, or raises (for instance ``NotFoundError``).
"""

from __future__ import annotations

import copy
import random
import time
from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any, Protocol

from opertools.log import Logger, log as default_log
from opertools.utils import NamespacedName

ResourceConditionCheck = Callable[[Any, "BaseException | None"], bool]
CustomResourceConditionCheck = Callable[[], bool]


class NotFoundError(Exception):
    """The requested object does not exist."""


class NoMatchError(Exception):
    """The object's kind is not known to the server."""


class WaitTimeoutError(Exception):
    """The condition was not met within the allowed steps."""


class Client(Protocol):
    def get(self, key: NamespacedName, obj: Mapping[str, Any]) -> Mapping[str, Any]:
        ...


def _jittered(duration: float, max_factor: float) -> float:
    if max_factor <= 0:
        max_factor = 1.0
    return duration + random.random() * max_factor * duration


@dataclass
class Backoff:
    """Delays between attempts, in seconds, growing by ``factor`` up to ``cap``."""

    duration: float = 0.0
    factor: float = 0.0
    jitter: float = 0.0
    steps: int = 0
    cap: float = 0.0

    def step(self) -> float:
        """Return the next delay and advance the backoff."""
        if self.steps < 1:
            if self.jitter > 0:
                return _jittered(self.duration, self.jitter)
            return self.duration
        self.steps -= 1
        duration = self.duration
        if self.factor != 0:
            self.duration = duration * self.factor
            if self.cap > 0 and self.duration > self.cap:
                self.duration = self.cap
                self.steps = 0
        if self.jitter > 0:
            duration = _jittered(duration, self.jitter)
        return duration


def exponential_backoff(backoff: Backoff, condition: Callable[[], bool]) -> None:
    """Call ``condition`` until it returns True, sleeping between attempts.

    Exceptions from ``condition`` propagate; ``WaitTimeoutError`` is raised when
    the steps run out.
    """
    state = replace(backoff)
    while state.steps > 0:
        if condition():
            return
        if state.steps == 1:
            break
        time.sleep(state.step())
    raise WaitTimeoutError("timed out waiting for the condition")


def _group(obj: Mapping[str, Any]) -> str:
    group, sep, _ = (obj.get("apiVersion") or "").rpartition("/")
    return group if sep else ""


def exists_condition_check(obj: Any, error: BaseException | None) -> bool:
    """True if the object could be fetched."""
    return error is None


def non_exists_condition_check(obj: Any, error: BaseException | None) -> bool:
    """True if the object or its kind does not exist."""
    return isinstance(error, (NotFoundError, NoMatchError))


def crd_established_condition_check(obj: Any, error: BaseException | None) -> bool:
    """True unless ``obj`` is a custom resource definition that is not yet established."""
    if not isinstance(obj, Mapping):
        return True
    if obj.get("kind") != "CustomResourceDefinition" or _group(obj) != "apiextensions.k8s.io":
        return True
    conditions = (obj.get("status") or {}).get("conditions") or []
    return any(
        condition.get("type") == "Established" and condition.get("status") == "True"
        for condition in conditions
    )


def ready_replicas_condition_check(obj: Any, error: BaseException | None) -> bool:
    """True unless a deployment, stateful set or daemon set has pods not yet ready."""
    if not isinstance(obj, Mapping) or obj.get("apiVersion") != "apps/v1":
        return True
    status = obj.get("status") or {}
    kind = obj.get("kind")
    if kind in ("Deployment", "StatefulSet"):
        return (status.get("readyReplicas") or 0) == (status.get("replicas") or 0)
    if kind == "DaemonSet":
        return (status.get("desiredNumberScheduled") or 0) == (
            status.get("numberReady") or 0
        )
    return True


@contextmanager
def _grouped(log: Any) -> Iterator[None]:
    grouped = getattr(log, "grouped", None)
    if callable(grouped):
        grouped(True)
        try:
            yield
        finally:
            grouped(False)
    else:
        yield


class ResourceConditionChecks:
    """Waits for objects or custom conditions using a client and a backoff."""

    def __init__(
        self, client: Client, backoff: Backoff, log: Logger | None = None
    ) -> None:
        self.client = client
        self.backoff = backoff
        self.log = log if log is not None else default_log

    def wait_for_custom_condition_checks(
        self, ident: str, *args: CustomResourceConditionCheck
    ) -> None:
        """Wait until every check returns True."""
        log = self.log.with_name(ident)
        with _grouped(log):
            log.info("waiting")
            exponential_backoff(self.backoff, lambda: all(check() for check in args))
            log.info("done")

    def wait_for_resources(
        self,
        ident: str,
        objects: Iterable[Mapping[str, Any]],
        *args: ResourceConditionCheck,
    ) -> None:
        """Wait, object by object, until every check holds for each object."""
        objects = list(objects)
        if not objects or not args:
            return
        log = self.log.with_name(ident)
        with _grouped(log):
            log.info("waiting")
            for obj in objects:
                self._wait_for_resource_conditions(obj, log, args)
            log.info("done")

    def _wait_for_resource_conditions(
        self,
        obj: Mapping[str, Any],
        log: Logger,
        checks: tuple[ResourceConditionCheck, ...],
    ) -> None:
        resource = copy.deepcopy(dict(obj))
        meta = resource.get("metadata")
        if not isinstance(meta, Mapping):
            raise ValueError("failed to get object key: object has no metadata")
        key = NamespacedName(
            namespace=meta.get("namespace") or "", name=meta.get("name") or ""
        )
        log = log.with_values(*_resource_details(resource))
        log.v(1).info("pending")

        def condition() -> bool:
            nonlocal resource
            error: BaseException | None = None
            try:
                resource = copy.deepcopy(dict(self.client.get(key, resource)))
            except Exception as exc:
                error = exc
            for check in checks:
                if not check(resource, error):
                    if error is not None:
                        self.log.v(2).info("still waiting", "error", error)
                    return False
            return True

        exponential_backoff(self.backoff, condition)
        log.v(1).info("ok")


def _resource_details(obj: Mapping[str, Any]) -> list[Any]:
    values: list[Any] = []
    meta = obj.get("metadata")
    if isinstance(meta, Mapping):
        values += ["name", meta.get("name") or ""]
        if meta.get("namespace"):
            values += ["namespace", meta["namespace"]]
    values += ["apiVersion", obj.get("apiVersion") or "", "kind", obj.get("kind") or ""]
    return values


def get_formatted_name(name: str, namespace: str, kind: str, group: str) -> str:
    """Format an object as ``kind.group:namespace/name``."""
    group_part = f".{group}" if group else ""
    namespace_part = f"{namespace}/" if namespace else ""
    return f"{kind.lower()}{group_part}:{namespace_part}{name}"