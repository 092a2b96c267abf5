# pgoperator

This package has building blocks for an operator that runs a replicated
PostgreSQL cluster (one primary and any number of replicas) on Kubernetes.
It needs only the standard library.

## Modules

### `pgoperator.api`

This module defines the `Kubegres` custom resource as dataclasses.

- `KubegresSpec` holds the spec fields: `replicas`, `image`, `port`,
  `image_pull_secrets`, `custom_config`, `database`, `failover`, `backup`,
  `env`, `scheduler`, `resources`, `volume`, `security_context`,
  `liveness_probe` and `readiness_probe`.
- `KubegresStatus` holds the status fields, including the current and the
  previous `KubegresBlockingOperation`.
- `Kubegres.to_dict()` and `Kubegres.from_dict()` convert the resource to and
  from a JSON-shaped manifest. In the output, empty scalar and list fields are
  left out. Optional fields are left out only when they are `None`. Nested
  objects are always written.
- `Kubegres.name` and `Kubegres.namespace` read and write the corresponding
  entries of `metadata`.
- `KubegresList` does the same for a list of resources.
- `GroupVersion` is the type of `GROUP_VERSION`, the group and version the
  resource is registered under. `str(GROUP_VERSION)` gives
  `"kubegres.reactive-tech.io/v1"`.

### `pgoperator.eventlog`

- `interfaces_to_str(*args)` turns sequences of alternating keys and values
  into text of the form `'key': value, ...`. A missing value is rendered as
  `<nil>`.
- `LogWrapper(kubegres, logger, recorder)` writes log lines to a standard
  `logging.Logger`. The methods `info_event`, `warning_event` and
  `error_event` also record an event on the resource through `recorder`, with
  type `EventType.NORMAL` or `EventType.WARNING`. Any object with a method
  `event(obj, event_type, reason, message)` can serve as the recorder.
- `with_values(...)` adds key/value pairs to every later log line.
  `with_name(name)` switches to a child logger.

### `pgoperator.status`

`KubegresStatusWrapper(kubegres, log, client)` exposes four status fields as
properties:

- `last_created_instance_index`
- `enforced_replicas`
- `blocking_operation`
- `previous_blocking_operation`

Setting one of them records it in `pending_changes`.
`update_status_if_changed()` does nothing when no field was set. Otherwise it
logs each change and calls `client.update_status(kubegres)`. An exception
raised by the client is logged and then re-raised.

### `pgoperator.context`

- `KubegresContext(kubegres, status, log, client)` gives the naming rules:
  - `service_resource_name(is_primary)`
  - `statefulset_resource_name(instance_index)`
  - `is_reserved_volume_name(volume_name)`
- The module also defines the operator's constants, such as
  `DEFAULT_CONTAINER_PORT_NUMBER`, `BASE_CONFIG_MAP_NAME` and
  `DEPLOYMENT_OWNER_KEY`.
- `owner_index_values(obj)` returns the name of the Kubegres that controls a
  manifest, taken from its `ownerReferences`, or `[]` if there is none.
- `create_owner_key_indexation(field_indexer)` registers that function on
  `DEPLOYMENT_OWNER_KEY` for each kind in `OWNED_RESOURCE_KINDS`. The field
  indexer is any object with `index_field(resource_kind, field_name, extract)`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
import logging

from pgoperator.api import Kubegres
from pgoperator.context import KubegresContext
from pgoperator.eventlog import LogWrapper
from pgoperator.status import KubegresStatusWrapper


class PrintRecorder:
    def event(self, obj, event_type, reason, message):
        print(event_type.value, reason, message)


class NoopClient:
    def update_status(self, kubegres):
        pass


resource = Kubegres.from_dict({
    "apiVersion": "kubegres.reactive-tech.io/v1",
    "kind": "Kubegres",
    "metadata": {"name": "mypostgres", "namespace": "default"},
    "spec": {"replicas": 3, "image": "postgres:16", "database": {"size": "200Mi"}},
})

log = LogWrapper(resource, logging.getLogger("pgoperator"), PrintRecorder())
status = KubegresStatusWrapper(resource, log, NoopClient())
context = KubegresContext(kubegres=resource, status=status, log=log, client=NoopClient())

context.service_resource_name(True)             # "mypostgres"
context.service_resource_name(False)            # "mypostgres-replica"
context.statefulset_resource_name(2)            # "mypostgres-2"
context.is_reserved_volume_name("postgres-db")  # True

log.info_event("Example", "Resource loaded.", "name", resource.name)
# prints: Normal Example Resource loaded. 'name': mypostgres

status.enforced_replicas = 3
status.update_status_if_changed()               # calls NoopClient.update_status
```

## What this package does not do

The package does not include a reconciliation loop. It does not talk to a
Kubernetes API server, so the client, event recorder and field indexer must
be supplied by the caller. It does not check specs, apply default values,
create resources from templates, or perform failover. It provides no command
to run.