"""Tracks and persists changes to a Kubegres resource's status."""

from __future__ import annotations

from typing import Any, Protocol

from pgoperator.api import Kubegres, KubegresBlockingOperation
from pgoperator.eventlog import LogWrapper

__all__ = ["StatusClient", "KubegresStatusWrapper"]


class StatusClient(Protocol):
    def update_status(self, kubegres: Kubegres) -> None: ...


class KubegresStatusWrapper:
    """Status fields of a Kubegres resource, remembering which ones were set."""

    def __init__(self, kubegres: Kubegres, log: LogWrapper, client: StatusClient) -> None:
        self.kubegres = kubegres
        self.log = log
        self.client = client
        self._fields_to_update: dict[str, Any] = {}

    @property
    def pending_changes(self) -> dict[str, Any]:
        return dict(self._fields_to_update)

    @property
    def last_created_instance_index(self) -> int:
        return self.kubegres.status.last_created_instance_index

    @last_created_instance_index.setter
    def last_created_instance_index(self, value: int) -> None:
        self._fields_to_update["LastCreatedInstanceIndex"] = value
        self.kubegres.status.last_created_instance_index = value

    @property
    def blocking_operation(self) -> KubegresBlockingOperation:
        return self.kubegres.status.blocking_operation

    @blocking_operation.setter
    def blocking_operation(self, value: KubegresBlockingOperation) -> None:
        self._fields_to_update["BlockingOperation"] = value
        self.kubegres.status.blocking_operation = value

    @property
    def enforced_replicas(self) -> int:
        return self.kubegres.status.enforced_replicas

    @enforced_replicas.setter
    def enforced_replicas(self, value: int) -> None:
        self._fields_to_update["EnforcedReplicas"] = value
        self.kubegres.status.enforced_replicas = value

    @property
    def previous_blocking_operation(self) -> KubegresBlockingOperation:
        return self.kubegres.status.previous_blocking_operation

    @previous_blocking_operation.setter
    def previous_blocking_operation(self, value: KubegresBlockingOperation) -> None:
        self._fields_to_update["PreviousBlockingOperation"] = value
        self.kubegres.status.previous_blocking_operation = value

    def update_status_if_changed(self) -> None:
        """Persist the status if any field was set; errors from the client propagate."""
        if not self._fields_to_update:
            return
        for name, value in self._fields_to_update.items():
            self.log.info("Updating Kubegres' status: ", "Field", name, "New value", value)
        try:
            self.client.update_status(self.kubegres)
        except Exception as err:
            self.log.error(err, "Failed to update Kubegres status")
            raise
        self.log.info("Kubegres status updated.")