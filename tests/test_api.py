import json

import pytest

from pgoperator.api import (
    GROUP_VERSION,
    GroupVersion,
    Kubegres,
    KubegresBlockingOperation,
    KubegresDatabase,
    KubegresList,
    KubegresSpec,
    KubegresStatefulSetOperation,
    KubegresStatus,
    Volume,
    VolumeClaimTemplate,
)


def test_group_version_string():
    group_version = GroupVersion(group="kubegres.reactive-tech.io", version="v1")
    assert str(group_version) == "kubegres.reactive-tech.io/v1"
    assert str(GROUP_VERSION) == str(group_version)


def test_group_version_without_group_is_version_only():
    assert str(GroupVersion(group="", version="v1")) == "v1"


def test_default_resource_carries_group_version_and_kind():
    data = Kubegres().to_dict()
    assert data["apiVersion"] == str(GROUP_VERSION)
    assert data["kind"] == "Kubegres"


def test_empty_fields_are_omitted_but_structs_kept():
    spec = Kubegres().to_dict()["spec"]
    assert "replicas" not in spec
    assert "image" not in spec
    assert "port" not in spec
    assert spec["database"] == {}
    assert spec["failover"] == {}
    assert spec["resources"] == {}


def test_pointer_fields_keep_zero_values():
    resource = Kubegres(
        spec=KubegresSpec(replicas=0, database=KubegresDatabase(storage_class_name=""))
    )
    spec = resource.to_dict()["spec"]
    assert spec["replicas"] == 0
    assert spec["database"]["storageClassName"] == ""


def test_round_trip_preserves_resource():
    resource = Kubegres(
        metadata={"name": "mypostgres", "namespace": "default"},
        spec=KubegresSpec(
            replicas=3,
            image="postgres:16",
            port=5433,
            database=KubegresDatabase(size="300Mi", volume_mount="/var/lib/postgresql/data"),
            env=[{"name": "POSTGRES_PASSWORD", "value": "password"}],
            volume=Volume(
                volume_claim_templates=[
                    VolumeClaimTemplate(name="extra", spec={"storageClassName": "standard"})
                ]
            ),
        ),
        status=KubegresStatus(
            last_created_instance_index=3,
            enforced_replicas=3,
            blocking_operation=KubegresBlockingOperation(
                operation_id="op",
                stateful_set_operation=KubegresStatefulSetOperation(instance_index=2, name="mypostgres-2"),
            ),
        ),
    )
    encoded = json.loads(json.dumps(resource.to_dict()))
    assert Kubegres.from_dict(encoded) == resource


def test_from_dict_reads_camel_case_names():
    resource = Kubegres.from_dict(
        {
            "metadata": {"name": "mypostgres"},
            "spec": {"replicas": 3, "database": {"size": "300Mi", "storageClassName": "standard"}},
        }
    )
    assert resource.name == "mypostgres"
    assert resource.spec.replicas == 3
    assert resource.spec.database.size == "300Mi"
    assert resource.spec.database.storage_class_name == "standard"


def test_from_dict_null_non_pointer_keeps_default():
    resource = Kubegres.from_dict({"spec": {"image": None, "database": None}})
    assert resource.spec.image == ""
    assert resource.spec.database == KubegresDatabase()


def test_from_dict_rejects_non_mapping():
    with pytest.raises(TypeError):
        Kubegres.from_dict(["spec"])


def test_name_and_namespace_properties_write_metadata():
    resource = Kubegres()
    resource.name = "kubegres-one"
    resource.namespace = "toto"
    assert resource.to_dict()["metadata"] == {"name": "kubegres-one", "namespace": "toto"}


def test_list_round_trip_and_items_always_written():
    assert KubegresList().to_dict()["items"] == []
    listing = KubegresList(items=[Kubegres(metadata={"name": "kubegres-one"})])
    decoded = KubegresList.from_dict(listing.to_dict())
    assert decoded == listing
    assert decoded.items[0].name == "kubegres-one"