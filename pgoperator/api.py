"""Schema of the Kubegres custom resource and its JSON mapping."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import MISSING, dataclass, field, fields, is_dataclass
from typing import Any, Optional, TypeVar

__all__ = [
    "GroupVersion",
    "GROUP_VERSION",
    "KIND_KUBEGRES",
    "KIND_KUBEGRES_LIST",
    "KubegresDatabase",
    "KubegresBackUp",
    "KubegresFailover",
    "KubegresScheduler",
    "VolumeClaimTemplate",
    "Volume",
    "KubegresSpec",
    "KubegresStatefulSetOperation",
    "KubegresStatefulSetSpecUpdateOperation",
    "KubegresBlockingOperation",
    "KubegresStatus",
    "Kubegres",
    "KubegresList",
]


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with its version."""

    group: str
    version: str

    def __str__(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"


GROUP_VERSION = GroupVersion(group="kubegres.reactive-tech.io", version="v1")
KIND_KUBEGRES = "Kubegres"
KIND_KUBEGRES_LIST = "KubegresList"


def _field(
    json_name: str,
    default: Any = MISSING,
    *,
    factory: Any = MISSING,
    pointer: bool = False,
    keep: bool = False,
    nested: Optional[type] = None,
    item: Optional[type] = None,
) -> Any:
    """Declare a dataclass field with its JSON name and emptiness rules.

    ``pointer`` fields are omitted only when None; ``keep`` fields are always
    written; ``nested`` fields hold another schema object and are always
    written; other fields are omitted when empty.
    """
    meta = {
        "json": json_name,
        "pointer": pointer,
        "keep": keep,
        "nested": nested,
        "item": item,
    }
    if factory is not MISSING:
        return field(default_factory=factory, metadata=meta)
    return field(default=default, metadata=meta)


def _encode(obj: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in fields(obj):
        meta = f.metadata
        name = meta["json"]
        value = getattr(obj, f.name)
        if meta["nested"] is not None:
            out[name] = _encode(value)
            continue
        if meta["item"] is not None and value is not None:
            value = [_encode(entry) if is_dataclass(entry) else entry for entry in value]
        if meta["keep"]:
            out[name] = copy.deepcopy(value)
        elif meta["pointer"]:
            if value is not None:
                out[name] = copy.deepcopy(value)
        elif value:
            out[name] = copy.deepcopy(value)
    return out


_T = TypeVar("_T")


def _decode(cls: type[_T], data: Any) -> _T:
    if not isinstance(data, Mapping):
        raise TypeError(f"{cls.__name__} expects a mapping, got {type(data).__name__}")
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        meta = f.metadata
        name = meta["json"]
        if name not in data:
            continue
        raw = data[name]
        if meta["nested"] is not None:
            kwargs[f.name] = _decode(meta["nested"], raw if raw is not None else {})
        elif meta["item"] is not None:
            kwargs[f.name] = [_decode(meta["item"], entry) for entry in raw or []]
        elif raw is None and not meta["pointer"]:
            continue
        else:
            kwargs[f.name] = copy.deepcopy(raw)
    return cls(**kwargs)


# ----------------------- SPEC -------------------------------------------


@dataclass
class KubegresDatabase:
    size: str = _field("size", "")
    volume_mount: str = _field("volumeMount", "")
    storage_class_name: Optional[str] = _field("storageClassName", None, pointer=True)


@dataclass
class KubegresBackUp:
    schedule: str = _field("schedule", "")
    volume_mount: str = _field("volumeMount", "")
    pvc_name: str = _field("pvcName", "")


@dataclass
class KubegresFailover:
    is_disabled: bool = _field("isDisabled", False)
    promote_pod: str = _field("promotePod", "")


@dataclass
class KubegresScheduler:
    affinity: Optional[dict[str, Any]] = _field("affinity", None, pointer=True)
    tolerations: list[dict[str, Any]] = _field("tolerations", factory=list)


@dataclass
class VolumeClaimTemplate:
    name: str = _field("name", "")
    spec: dict[str, Any] = _field("spec", factory=dict, keep=True)


@dataclass
class Volume:
    volume_mounts: list[dict[str, Any]] = _field("volumeMounts", factory=list)
    volumes: list[dict[str, Any]] = _field("volumes", factory=list)
    volume_claim_templates: list[VolumeClaimTemplate] = _field(
        "volumeClaimTemplates", factory=list, item=VolumeClaimTemplate
    )


@dataclass
class KubegresSpec:
    replicas: Optional[int] = _field("replicas", None, pointer=True)
    image: str = _field("image", "")
    port: int = _field("port", 0)
    image_pull_secrets: list[dict[str, Any]] = _field("imagePullSecrets", factory=list)
    custom_config: str = _field("customConfig", "")
    database: KubegresDatabase = _field(
        "database", factory=KubegresDatabase, nested=KubegresDatabase
    )
    failover: KubegresFailover = _field(
        "failover", factory=KubegresFailover, nested=KubegresFailover
    )
    backup: KubegresBackUp = _field("backup", factory=KubegresBackUp, nested=KubegresBackUp)
    env: list[dict[str, Any]] = _field("env", factory=list)
    scheduler: KubegresScheduler = _field(
        "scheduler", factory=KubegresScheduler, nested=KubegresScheduler
    )
    resources: dict[str, Any] = _field("resources", factory=dict, keep=True)
    volume: Volume = _field("volume", factory=Volume, nested=Volume)
    security_context: Optional[dict[str, Any]] = _field("securityContext", None, pointer=True)
    liveness_probe: Optional[dict[str, Any]] = _field("livenessProbe", None, pointer=True)
    readiness_probe: Optional[dict[str, Any]] = _field("readinessProbe", None, pointer=True)


# ----------------------- STATUS -----------------------------------------


@dataclass
class KubegresStatefulSetOperation:
    instance_index: int = _field("instanceIndex", 0)
    name: str = _field("name", "")


@dataclass
class KubegresStatefulSetSpecUpdateOperation:
    spec_differences: str = _field("specDifferences", "")


@dataclass
class KubegresBlockingOperation:
    operation_id: str = _field("operationId", "")
    step_id: str = _field("stepId", "")
    time_out_epoc_in_seconds: int = _field("timeOutEpocInSeconds", 0)
    has_timed_out: bool = _field("hasTimedOut", False)
    stateful_set_operation: KubegresStatefulSetOperation = _field(
        "statefulSetOperation",
        factory=KubegresStatefulSetOperation,
        nested=KubegresStatefulSetOperation,
    )
    stateful_set_spec_update_operation: KubegresStatefulSetSpecUpdateOperation = _field(
        "statefulSetSpecUpdateOperation",
        factory=KubegresStatefulSetSpecUpdateOperation,
        nested=KubegresStatefulSetSpecUpdateOperation,
    )


@dataclass
class KubegresStatus:
    last_created_instance_index: int = _field("lastCreatedInstanceIndex", 0)
    blocking_operation: KubegresBlockingOperation = _field(
        "blockingOperation",
        factory=KubegresBlockingOperation,
        nested=KubegresBlockingOperation,
    )
    previous_blocking_operation: KubegresBlockingOperation = _field(
        "previousBlockingOperation",
        factory=KubegresBlockingOperation,
        nested=KubegresBlockingOperation,
    )
    enforced_replicas: int = _field("enforcedReplicas", 0)


# ----------------------- RESOURCE ---------------------------------------


@dataclass
class Kubegres:
    """The Kubegres custom resource."""

    api_version: str = _field("apiVersion", str(GROUP_VERSION))
    kind: str = _field("kind", KIND_KUBEGRES)
    metadata: dict[str, Any] = _field("metadata", factory=dict, keep=True)
    spec: KubegresSpec = _field("spec", factory=KubegresSpec, nested=KubegresSpec)
    status: KubegresStatus = _field("status", factory=KubegresStatus, nested=KubegresStatus)

    @property
    def name(self) -> str:
        return self.metadata.get("name", "")

    @name.setter
    def name(self, value: str) -> None:
        self.metadata["name"] = value

    @property
    def namespace(self) -> str:
        return self.metadata.get("namespace", "")

    @namespace.setter
    def namespace(self, value: str) -> None:
        self.metadata["namespace"] = value

    def to_dict(self) -> dict[str, Any]:
        """Return the resource as a JSON-compatible mapping."""
        return _encode(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Kubegres":
        """Build a resource from a JSON-compatible mapping."""
        return _decode(cls, data)


@dataclass
class KubegresList:
    """A list of Kubegres resources."""

    api_version: str = _field("apiVersion", str(GROUP_VERSION))
    kind: str = _field("kind", KIND_KUBEGRES_LIST)
    metadata: dict[str, Any] = _field("metadata", factory=dict, keep=True)
    items: list[Kubegres] = _field("items", factory=list, keep=True, item=Kubegres)

    def to_dict(self) -> dict[str, Any]:
        """Return the list as a JSON-compatible mapping."""
        return _encode(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "KubegresList":
        """Build a list from a JSON-compatible mapping."""
        return _decode(cls, data)