# kode_operator

Helpers for running Kode development workspaces behind an Envoy sidecar:

- `kode_operator.constants`: finalizer names, defaults and the `ConditionType`
  and `ConditionStatus` enums shared by Kode and EntryPoint resources.
- `kode_operator.envoy_types`: typed Envoy configuration objects that convert
  to and from mappings keyed by the field names Envoy expects.
- `kode_operator.bootstrap`: a generator for a complete Envoy bootstrap YAML,
  optionally routing requests through a basic-auth `ext_authz` service.
- `kode_operator.validation`: validation of Kode init plugins, with a helper
  that records the outcome as a `Validated` condition.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Generating an Envoy bootstrap configuration

```python
import logging

from kode_operator.bootstrap import BootstrapConfigGenerator

generator = BootstrapConfigGenerator(logging.getLogger("envoy"))
yaml_text = generator.generate_envoy_config(port=8000, use_basic_auth=True)
print(yaml_text)
```

The logger is optional; without one the module's own logger is used. The
generated YAML is also logged at debug level.

The listener `listener_0` binds to `0.0.0.0` on the given port and forwards
every request to the `local_service` cluster, which points to the workspace
container on `127.0.0.1:3000` (`constants.DEFAULT_KODE_POD_PORT`). With
`use_basic_auth=True` an `ext_authz` filter is placed in front of the router and
a `basic_auth_service` cluster pointing to `127.0.0.1:9001` is added. The admin
interface listens on `0.0.0.0:9901` and logs to `/dev/stdout`.

`port` must be an integer from 0 to 4294967295: anything else raises
`TypeError` (not an integer) or `ValueError` (out of range).

`generator.http_filters(use_basic_auth)` and `generator.clusters(use_basic_auth)`
return the `HTTPFilterConfig` and `Cluster` objects on their own.

## Envoy configuration objects

Every structured type in `kode_operator.envoy_types` (`Cluster`, `Listener`,
`Route`, `BootstrapConfig` and the rest) is a dataclass derived from
`EnvoyObject`, with `to_dict()` and the class method `from_dict(data)`.

- `to_dict()` leaves out optional fields that hold an empty value, so the
  result serialises to compact YAML or JSON.
- `from_dict()` ignores unknown keys, gives missing or null keys their empty
  value, and raises `TypeError` (or `ValueError` for a negative integer) when a
  value has the wrong type.

`DynamicValue` carries any value inline, for `typed_config` blocks and the like;
its `to_dict()` returns the wrapped value unchanged.

```python
from kode_operator.envoy_types import SocketAddress

SocketAddress(address="127.0.0.1").to_dict()  # {'address': '127.0.0.1'}
```

## Validation

```python
from kode_operator.validation import validate_init_plugins, set_validation_condition

result = validate_init_plugins([{"image": "busybox"}, {"name": "no-image"}])
result.valid   # False
result.errors  # ['initPlugin[1]: image is required']
```

Plugins may be mappings or objects with an `image` attribute.
`set_validation_condition(status, result)` calls
`status.set_condition(condition_type, status, reason, message)` on any object
that has such a method: with `ConditionType.VALIDATED`, `ConditionStatus.TRUE`
and reason `ValidationSucceeded` for a valid result, or `ConditionStatus.FALSE`,
reason `ValidationFailed` and the message
`Resource validation failed: ` followed by the errors joined by `"; "`.

## What this package does not do

It has no controller, no command and no connection to a Kubernetes cluster: it
does not watch or reconcile resources, create pods, services or routes, or
store anything. It only builds configuration text and validation results for a
caller to use.