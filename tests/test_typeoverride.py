import pytest

from opertools.typeoverride import (
    DaemonSet,
    Deployment,
    DeploymentSpec,
    EmbeddedPersistentVolumeClaimObjectMeta,
    IngressNetworkingV1beta1,
    ObjectMeta,
    PersistentVolumeClaim,
    PodSpec,
    PodTemplateSpec,
    Service,
    ServiceAccount,
    StatefulSet,
    StatefulSetSpec,
    from_dict,
    to_dict,
)


def test_merge_empty_override_on_empty_meta():
    result = ObjectMeta().merge({})
    assert "labels" not in result
    assert "annotations" not in result


def test_merge_override_on_empty_meta():
    override = ObjectMeta(annotations={"annotation": "a"}, labels={"label": "l"})
    result = override.merge({})
    assert result["labels"] == {"label": "l"}
    assert result["annotations"] == {"annotation": "a"}


def test_merge_override_on_existing_meta():
    original = {
        "name": "keep",
        "annotations": {"annotation": "a", "other": "x"},
        "labels": {"label": "l"},
    }
    override = ObjectMeta(annotations={"annotation": "a2"}, labels={"label": "l2"})
    result = override.merge(original)
    assert result["annotations"] == {"annotation": "a2", "other": "x"}
    assert result["labels"] == {"label": "l2"}
    assert result["name"] == "keep"
    assert original["annotations"]["annotation"] == "a"


def test_empty_deployment_writes_nested_structures():
    assert to_dict(Deployment()) == {
        "metadata": {},
        "spec": {"template": {"metadata": {}, "spec": {}}, "strategy": {}},
    }


def test_optional_zero_is_written_but_plain_zero_is_not():
    rendered = to_dict(DeploymentSpec(replicas=0, min_ready_seconds=0, paused=False))
    assert rendered["replicas"] == 0
    assert "minReadySeconds" not in rendered
    assert "paused" not in rendered


def test_pod_spec_json_keys():
    spec = PodSpec(
        host_pid=True,
        host_ipc=True,
        set_hostname_as_fqdn=False,
        dns_policy="ClusterFirst",
        service_account_name="sa",
    )
    assert to_dict(spec) == {
        "hostPID": True,
        "hostIPC": True,
        "setHostnameAsFQDN": False,
        "dnsPolicy": "ClusterFirst",
        "serviceAccountName": "sa",
    }


def test_service_round_trip():
    service = Service(
        metadata=ObjectMeta(labels={"app": "web"}),
        spec={"type": "ClusterIP", "ports": [{"port": 80}]},
    )
    data = to_dict(service)
    assert data["spec"] == {"type": "ClusterIP", "ports": [{"port": 80}]}
    assert from_dict(Service, data) == service


def test_stateful_set_round_trip_with_claims():
    sts = StatefulSet(
        metadata=ObjectMeta(annotations={"a": "b"}),
        spec=StatefulSetSpec(
            replicas=3,
            service_name="headless",
            template=PodTemplateSpec(spec=PodSpec(containers=[{"name": "main"}])),
            volume_claim_templates=[
                PersistentVolumeClaim(
                    metadata=EmbeddedPersistentVolumeClaimObjectMeta(name="data"),
                    spec={"accessModes": ["ReadWriteOnce"]},
                )
            ],
        ),
    )
    data = to_dict(sts)
    assert data["spec"]["volumeClaimTemplates"][0]["metadata"] == {"name": "data"}
    restored = from_dict(StatefulSet, data)
    assert restored == sts
    assert restored.spec.volume_claim_templates[0].metadata.name == "data"


def test_from_dict_ignores_unknown_keys_and_keeps_defaults():
    deployment = from_dict(
        Deployment,
        {"kind": "Deployment", "spec": {"replicas": 2, "unknown": 1}},
    )
    assert deployment.spec.replicas == 2
    assert deployment.spec.template == PodTemplateSpec()
    assert deployment.metadata == ObjectMeta()


def test_from_dict_copies_input():
    data = {"spec": {"template": {"spec": {"containers": [{"name": "c"}]}}}}
    daemon_set = from_dict(DaemonSet, data)
    daemon_set.spec.template.spec.containers[0]["name"] = "changed"
    assert data["spec"]["template"]["spec"]["containers"][0]["name"] == "c"


def test_from_dict_none_gives_defaults():
    assert from_dict(ServiceAccount, None) == ServiceAccount()


def test_from_dict_rejects_non_mapping():
    with pytest.raises(TypeError):
        from_dict(IngressNetworkingV1beta1, ["not", "a", "mapping"])


def test_from_dict_rejects_non_list_claims():
    with pytest.raises(TypeError):
        from_dict(StatefulSetSpec, {"volumeClaimTemplates": {"name": "x"}})


def test_to_dict_rejects_plain_values():
    with pytest.raises(TypeError):
        to_dict({"metadata": {}})


def test_service_account_omits_unset_token_setting():
    account = ServiceAccount(automount_service_account_token=False)
    data = to_dict(account)
    assert data["automountServiceAccountToken"] is False
    assert "secrets" not in data
    assert from_dict(ServiceAccount, data) == account