import logging

import pytest

from pgoperator.api import Kubegres, KubegresBlockingOperation
from pgoperator.eventlog import LogWrapper
from pgoperator.status import KubegresStatusWrapper

LOGGER_NAME = "pgtest.status"


class FakeRecorder:
    def __init__(self):
        self.events = []

    def event(self, obj, event_type, reason, message):
        self.events.append((obj, event_type, reason, message))


class FakeClient:
    def __init__(self, error=None):
        self.updated = []
        self.error = error

    def update_status(self, kubegres):
        if self.error is not None:
            raise self.error
        self.updated.append(kubegres)


def make_wrapper(client):
    kubegres = Kubegres(metadata={"name": "mypostgres"})
    log = LogWrapper(kubegres=kubegres, logger=logging.getLogger(LOGGER_NAME), recorder=FakeRecorder())
    return KubegresStatusWrapper(kubegres, log, client)


def test_no_change_means_no_update():
    client = FakeClient()
    wrapper = make_wrapper(client)
    wrapper.update_status_if_changed()
    assert client.updated == []
    assert wrapper.pending_changes == {}


def test_setters_change_resource_status():
    wrapper = make_wrapper(FakeClient())
    operation = KubegresBlockingOperation(operation_id="op", step_id="step")
    wrapper.last_created_instance_index = 3
    wrapper.enforced_replicas = 2
    wrapper.blocking_operation = operation
    wrapper.previous_blocking_operation = operation
    status = wrapper.kubegres.status
    assert status.last_created_instance_index == 3
    assert status.enforced_replicas == 2
    assert status.blocking_operation == operation
    assert wrapper.previous_blocking_operation == operation
    assert set(wrapper.pending_changes) == {
        "LastCreatedInstanceIndex",
        "EnforcedReplicas",
        "BlockingOperation",
        "PreviousBlockingOperation",
    }


def test_changed_status_is_sent_to_client(caplog):
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    client = FakeClient()
    wrapper = make_wrapper(client)
    wrapper.enforced_replicas = 3
    wrapper.update_status_if_changed()
    assert client.updated == [wrapper.kubegres]
    messages = [r.getMessage() for r in caplog.records]
    assert any("EnforcedReplicas" in m for m in messages)
    assert messages[-1] == "Kubegres status updated."


def test_client_failure_is_logged_and_raised(caplog):
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    wrapper = make_wrapper(FakeClient(error=RuntimeError("conflict")))
    wrapper.last_created_instance_index = 1
    with pytest.raises(RuntimeError, match="conflict"):
        wrapper.update_status_if_changed()
    error_records = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert error_records
    assert error_records[-1].getMessage().startswith("Failed to update Kubegres status")


def test_reading_status_does_not_mark_change():
    wrapper = make_wrapper(FakeClient())
    wrapper.kubegres.status.enforced_replicas = 4
    assert wrapper.enforced_replicas == 4
    assert wrapper.pending_changes == {}