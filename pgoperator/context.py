"""Shared context of a Kubegres reconciliation and its naming rules."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from pgoperator.api import GROUP_VERSION, KIND_KUBEGRES, Kubegres
from pgoperator.eventlog import LogWrapper
from pgoperator.status import KubegresStatusWrapper

__all__ = [
    "PRIMARY_ROLE_NAME",
    "KIND_KUBEGRES",
    "DEPLOYMENT_OWNER_KEY",
    "DATABASE_VOLUME_NAME",
    "BASE_CONFIG_MAP_VOLUME_NAME",
    "CUSTOM_CONFIG_MAP_VOLUME_NAME",
    "BASE_CONFIG_MAP_NAME",
    "CRON_JOB_NAME_PREFIX",
    "DEFAULT_CONTAINER_PORT_NUMBER",
    "DEFAULT_DATABASE_VOLUME_MOUNT",
    "DEFAULT_DATABASE_FOLDER",
    "ENV_VAR_NAME_PG_DATA",
    "ENV_VAR_NAME_OF_POSTGRES_SUPER_USER_PSW",
    "ENV_VAR_NAME_OF_POSTGRES_REPLICATION_USER_PSW",
    "OWNED_RESOURCE_KINDS",
    "FieldIndexer",
    "KubegresContext",
    "owner_index_values",
    "create_owner_key_indexation",
]

PRIMARY_ROLE_NAME = "primary"
DEPLOYMENT_OWNER_KEY = ".metadata.controller"
DATABASE_VOLUME_NAME = "postgres-db"
BASE_CONFIG_MAP_VOLUME_NAME = "base-config"
CUSTOM_CONFIG_MAP_VOLUME_NAME = "custom-config"
BASE_CONFIG_MAP_NAME = "base-kubegres-config"
CRON_JOB_NAME_PREFIX = "backup-"
DEFAULT_CONTAINER_PORT_NUMBER = 5432
DEFAULT_DATABASE_VOLUME_MOUNT = "/var/lib/postgresql/data"
DEFAULT_DATABASE_FOLDER = "pgdata"
ENV_VAR_NAME_PG_DATA = "PGDATA"
ENV_VAR_NAME_OF_POSTGRES_SUPER_USER_PSW = "POSTGRES_PASSWORD"
ENV_VAR_NAME_OF_POSTGRES_REPLICATION_USER_PSW = "POSTGRES_REPLICATION_PASSWORD"

_RESERVED_VOLUME_NAMES = frozenset(
    {DATABASE_VOLUME_NAME, BASE_CONFIG_MAP_VOLUME_NAME, CUSTOM_CONFIG_MAP_VOLUME_NAME}
)

# Kinds of resources a Kubegres owns and that are indexed by their owner.
OWNED_RESOURCE_KINDS = ("StatefulSet", "Service", "ConfigMap", "Pod")


class FieldIndexer(Protocol):
    def index_field(
        self,
        resource_kind: str,
        field_name: str,
        extract: Callable[[Mapping[str, Any]], list[str]],
    ) -> None: ...


@dataclass
class KubegresContext:
    """Everything a reconciliation step needs about the Kubegres being handled."""

    kubegres: Kubegres
    status: KubegresStatusWrapper
    log: LogWrapper
    client: Any

    def service_resource_name(self, is_primary: bool) -> str:
        if is_primary:
            return self.kubegres.name
        return self.kubegres.name + "-replica"

    def statefulset_resource_name(self, instance_index: int) -> str:
        return f"{self.kubegres.name}-{int(instance_index)}"

    def is_reserved_volume_name(self, volume_name: str) -> bool:
        return volume_name in _RESERVED_VOLUME_NAMES or "kube-api" in volume_name


def _controller_of(obj: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    metadata = obj.get("metadata") or {}
    for reference in metadata.get("ownerReferences") or []:
        if reference.get("controller") is True:
            return reference
    return None


def owner_index_values(obj: Mapping[str, Any]) -> list[str]:
    """Return the name of the Kubegres controlling ``obj``, or an empty list."""
    owner = _controller_of(obj)
    if owner is None:
        return []
    if owner.get("apiVersion") != str(GROUP_VERSION) or owner.get("kind") != KIND_KUBEGRES:
        return []
    return [owner.get("name", "")]


def create_owner_key_indexation(field_indexer: FieldIndexer) -> None:
    """Index every owned resource kind by the name of its controlling Kubegres."""
    for kind in OWNED_RESOURCE_KINDS:
        field_indexer.index_field(kind, DEPLOYMENT_OWNER_KEY, owner_index_values)