# opertools

Small building blocks for code that manages Kubernetes resources. Resources
are handled as plain Python dictionaries in their JSON form.

## Modules

- `opertools.utils`: provides `merge_labels`, where later maps win; `contains`;
  `hash32`, a 32-bit FNV-1 hash returned as lower-case hex;
  `ordered_string_map`, which returns a copy with sorted keys; and
  `object_key_from_meta`, which returns a `NamespacedName`.
- `opertools.log`: a frozen `Logger` that writes lines of the form
  `name> message key: value, key: value`. Create one with `new_logger(name, out, err, level)`;
  the streams default to standard error. Derive new loggers with `v`,
  `with_values` and `with_name`. `info` prints only when the logger's level is
  at or below the global verbosity, which you set with `set_global_log_level`
  and read with `get_global_log_level`. `error` always prints to the error
  stream. The module also provides a ready-made `log` instance.
- `opertools.sort`: `sort_objects(objects, order)` returns a new list. It sorts
  by the score from `ResourceOrder.INSTALL` or `ResourceOrder.UNINSTALL`, then
  by API group, kind and name. The scoring functions are
  `install_object_order` and `uninstall_object_order`. In install order,
  unknown kinds come last. In uninstall order, they come first.
- `opertools.basetypes`: well-known label keys, `ObjectKey`, and
  `ReconcileStatus` with `stable`, `available`, `failed` and `pending`.
  `aggregated_state` combines component statuses. `EnabledComponent` offers
  `is_enabled`, `is_disabled` and `is_skipped`. The module also holds the
  override types `MetaBase`, `ContainerBase`, `PodSpecBase`, `PodTemplateBase`,
  `DeploymentSpecBase`, `StatefulsetSpecBase` and `DaemonSetSpecBase`, plus the
  wrappers `DeploymentBase`, `StatefulSetBase` and `DaemonSetBase`, and
  `merge_selectors`. Each `override` and `merge` returns a new dictionary and
  leaves its input untouched.
- `opertools.typeoverride`: override types in which every field is optional,
  meant for embedding in your own specs. They are `ObjectMeta` (with `merge`),
  `Service`, `IngressExtensionsV1beta1`, `IngressNetworkingV1beta1`,
  `PodSpec`, `PodTemplateSpec`, `DeploymentSpec`, `Deployment`,
  `DaemonSetSpec`, `DaemonSet`, `StatefulSetSpec`, `StatefulSet`,
  `PersistentVolumeClaim`, `EmbeddedPersistentVolumeClaimObjectMeta` and
  `ServiceAccount`. `to_dict` renders one to JSON form and leaves out empty
  optional values. `from_dict(cls, data)` builds one and ignores unknown keys.
- `opertools.volume`: `KubernetesVolume`, built directly or with `from_dict`,
  holds a hostPath, emptyDir or PVC description. `get_volume` returns the pod
  volume; it falls back to an empty dir when nothing is configured.
  `apply_volume_for_pod_spec` and `apply_pvc_for_stateful_set` add the volume
  or claim template and mount it into the named container, changing the spec
  in place. `with_default_host_path` fills in a missing host path. Failures
  raise `VolumeError`.
- `opertools.wait`: provides `exponential_backoff(backoff, condition)` with a
  `Backoff` of seconds, factor, jitter, steps and cap; it raises
  `WaitTimeoutError` when the steps run out. `ResourceConditionChecks` offers
  `wait_for_resources` and `wait_for_custom_condition_checks`. The condition
  checks are `exists_condition_check`, `non_exists_condition_check`,
  `crd_established_condition_check` and `ready_replicas_condition_check`. The
  module also defines the `NotFoundError` and `NoMatchError` exceptions and
  `get_formatted_name`, which formats an object as `kind.group:namespace/name`.

## Examples

```python
from opertools.basetypes import DeploymentSpecBase

base = DeploymentSpecBase(replicas=3, selector={"matchLabels": {"app": "web"}})
spec = base.override({"selector": {"matchLabels": {"tier": "front"}}})
# spec == {"replicas": 3,
#          "selector": {"matchLabels": {"tier": "front", "app": "web"}}}
```

```python
from opertools.volume import KubernetesVolume

vol = KubernetesVolume.from_dict({"hostPath": {}})
pod_spec = {"containers": [{"name": "app"}]}
vol.apply_volume_for_pod_spec("data", "app", "/data", pod_spec)
# pod_spec["volumes"] == [{"name": "data", "hostPath": {}}]
# pod_spec["containers"][0]["volumeMounts"] == [{"name": "data", "mountPath": "/data"}]
```

## What it does not do

The package does not talk to a Kubernetes cluster. `ResourceConditionChecks`
works with a client you supply. That client is any object with a
`get(key, obj)` method, which returns the object's current state or raises, for
example `NotFoundError`. There is no command-line tool.

## Running the tests

```
pip install -e .[test]
pytest
```