"""Data model of the Envoy bootstrap configuration.

Every object converts to and from plain mappings whose keys follow Envoy's
field names. Fields marked as omit-empty are left out when they hold a zero
value, so the mappings serialise to compact YAML or JSON.
"""

import dataclasses
import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

_MISSING = dataclasses.MISSING


def _field(key: str, *, omitempty: bool = False, default: Any = _MISSING, factory: Any = _MISSING) -> Any:
    metadata = {"key": key, "omitempty": omitempty}
    if factory is not _MISSING:
        return dataclasses.field(default_factory=factory, metadata=metadata)
    return dataclasses.field(default=default, metadata=metadata)


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, DynamicValue):
        return value.value is None
    if isinstance(value, EnvoyObject):
        return all(_is_zero(getattr(value, f.name)) for f in dataclasses.fields(value))
    if isinstance(value, (bool, int, float, str, list, tuple, dict)):
        return not value
    return False


def _encode(value: Any) -> Any:
    if isinstance(value, (DynamicValue, EnvoyObject)):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _encode(item) for key, item in value.items()}
    return value


def _decode(tp: Any, raw: Any, where: str) -> Any:
    if tp is Any:
        return raw
    origin = typing.get_origin(tp)
    if origin is Union or origin is types.UnionType:
        if raw is None:
            return None
        inner = next(arg for arg in typing.get_args(tp) if arg is not type(None))
        return _decode(inner, raw, where)
    if origin is list:
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise TypeError(f"{where}: expected a list, got {type(raw).__name__}")
        (inner,) = typing.get_args(tp)
        return [_decode(inner, item, f"{where}[{i}]") for i, item in enumerate(raw)]
    if isinstance(tp, type) and issubclass(tp, DynamicValue):
        return tp.from_dict(raw)
    if isinstance(tp, type) and issubclass(tp, EnvoyObject):
        return tp() if raw is None else tp.from_dict(raw)
    if raw is None:
        return tp()
    if tp is bool:
        if not isinstance(raw, bool):
            raise TypeError(f"{where}: expected a bool, got {type(raw).__name__}")
        return raw
    if tp is int:
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise TypeError(f"{where}: expected an integer, got {type(raw).__name__}")
        if raw < 0:
            raise ValueError(f"{where}: expected a non-negative integer, got {raw}")
        return raw
    if tp is str:
        if not isinstance(raw, str):
            raise TypeError(f"{where}: expected a string, got {type(raw).__name__}")
        return raw
    return raw


@dataclass
class DynamicValue:
    """An arbitrary value embedded as-is, such as a typed config."""

    value: Any = None

    def to_dict(self) -> Any:
        """Return the wrapped value unchanged."""
        return self.value

    @classmethod
    def from_dict(cls, data: Any) -> "DynamicValue":
        """Wrap any decoded value."""
        return cls(value=data)


class EnvoyObject:
    """Base of the structured configuration objects."""

    def to_dict(self) -> dict[str, Any]:
        """Return a mapping keyed by Envoy field names, omitting empty optional fields."""
        out: dict[str, Any] = {}
        for f in dataclasses.fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if f.metadata.get("omitempty") and _is_zero(value):
                continue
            out[f.metadata.get("key", f.name)] = _encode(value)
        return out

    @classmethod
    def from_dict(cls, data: Any):
        """Build an object from a mapping keyed by Envoy field names.

        Unknown keys are ignored; missing or null keys take their zero value.
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__}: expected a mapping, got {type(data).__name__}")
        kwargs: dict[str, Any] = {}
        for f in dataclasses.fields(cls):  # type: ignore[arg-type]
            key = f.metadata.get("key", f.name)
            if key in data:
                kwargs[f.name] = _decode(f.type, data[key], f"{cls.__name__}.{key}")
        return cls(**kwargs)


@dataclass
class AccessLog(EnvoyObject):
    name: str = _field("name", default="")
    typed_config: DynamicValue = _field("typed_config", factory=DynamicValue)


@dataclass
class SocketAddress(EnvoyObject):
    address: str = _field("address", default="")
    protocol: str = _field("protocol", omitempty=True, default="")
    port_value: int = _field("port_value", omitempty=True, default=0)


@dataclass
class Pipe(EnvoyObject):
    path: str = _field("path", default="")
    mode: int = _field("mode", omitempty=True, default=0)


@dataclass
class EnvoyInternalAddress(EnvoyObject):
    server_listener_name: str = _field("server_listener_name", default="")
    endpoint_id: str = _field("endpoint_id", omitempty=True, default="")


@dataclass
class Address(EnvoyObject):
    socket_address: SocketAddress = _field("socket_address", factory=SocketAddress)
    pipe: Pipe = _field("pipe", omitempty=True, factory=Pipe)
    envoy_internal_address: EnvoyInternalAddress = _field(
        "envoy_internal_address", omitempty=True, factory=EnvoyInternalAddress
    )


@dataclass
class AdditionalAddress(EnvoyObject):
    address: Address = _field("address", factory=Address)


@dataclass
class HealthCheckConfig(EnvoyObject):
    port_value: int = _field("port_value", default=0)
    hostname: str = _field("hostname", omitempty=True, default="")
    address: Address = _field("address", omitempty=True, factory=Address)
    disable_active_health_check: bool = _field("disable_active_health_check", omitempty=True, default=False)


@dataclass
class UpgradeConfig(EnvoyObject):
    upgrade_type: str = _field("upgrade_type", default="")


@dataclass
class Endpoint(EnvoyObject):
    address: Address = _field("address", factory=Address)
    health_check_config: HealthCheckConfig = _field("health_check_config", omitempty=True, factory=HealthCheckConfig)
    hostname: str = _field("hostname", omitempty=True, default="")
    additional_addresses: list[AdditionalAddress] = _field("additional_addresses", omitempty=True, factory=list)


@dataclass
class LbEndpoint(EnvoyObject):
    endpoint: Endpoint = _field("endpoint", factory=Endpoint)
    health_status: str = _field("health_status", omitempty=True, default="")
    metadata: DynamicValue = _field("metadata", omitempty=True, factory=DynamicValue)
    load_balancing_weight: int = _field("load_balancing_weight", omitempty=True, default=0)


@dataclass
class Locality(EnvoyObject):
    region: str = _field("region", omitempty=True, default="")
    zone: str = _field("zone", omitempty=True, default="")
    sub_zone: str = _field("sub_zone", omitempty=True, default="")


@dataclass
class LocalityLbEndpoints(EnvoyObject):
    locality: Locality = _field("locality", omitempty=True, factory=Locality)
    metadata: DynamicValue = _field("metadata", omitempty=True, factory=DynamicValue)
    lb_endpoints: list[LbEndpoint] = _field("lb_endpoints", factory=list)
    load_balancing_weight: int = _field("load_balancing_weight", omitempty=True, default=0)
    priority: int = _field("priority", omitempty=True, default=0)


@dataclass
class LoadAssignment(EnvoyObject):
    cluster_name: str = _field("cluster_name", default="")
    endpoints: list[LocalityLbEndpoints] = _field("endpoints", factory=list)
    policy: DynamicValue = _field("policy", omitempty=True, factory=DynamicValue)


@dataclass
class HTTPFilter(EnvoyObject):
    name: str = _field("name", default="")
    typed_config: DynamicValue = _field("typed_config", factory=DynamicValue)


@dataclass
class Cluster(EnvoyObject):
    name: str = _field("name", default="")
    connect_timeout: str = _field("connect_timeout", default="")
    type: str = _field("type", default="")
    lb_policy: str = _field("lb_policy", default="")
    typed_extension_protocol_options: DynamicValue = _field(
        "typed_extension_protocol_options", omitempty=True, factory=DynamicValue
    )
    load_assignment: LoadAssignment = _field("load_assignment", factory=LoadAssignment)


@dataclass
class Filter(EnvoyObject):
    name: str = _field("name", default="")
    typed_config: DynamicValue = _field("typed_config", factory=DynamicValue)


@dataclass
class FilterChain(EnvoyObject):
    filters: list[Filter] = _field("filters", factory=list)


@dataclass
class Listener(EnvoyObject):
    name: str = _field("name", default="")
    address: Address = _field("address", factory=Address)
    filter_chains: list[FilterChain] = _field("filter_chains", factory=list)


@dataclass
class Match(EnvoyObject):
    prefix: str = _field("prefix", default="")


@dataclass
class SingleRoute(EnvoyObject):
    cluster: str = _field("cluster", default="")
    prefix_rewrite: str = _field("prefix_rewrite", omitempty=True, default="")


@dataclass
class Redirect(EnvoyObject):
    https_redirect: bool = _field("https_redirect", default=False)


@dataclass
class Route(EnvoyObject):
    match: Match = _field("match", factory=Match)
    route: Optional[SingleRoute] = _field("route", omitempty=True, default=None)
    redirect: Optional[Redirect] = _field("redirect", omitempty=True, default=None)
    typed_per_filter_config: DynamicValue = _field("typed_per_filter_config", omitempty=True, factory=DynamicValue)


@dataclass
class VirtualHost(EnvoyObject):
    name: str = _field("name", default="")
    domains: list[str] = _field("domains", factory=list)
    routes: list[Route] = _field("routes", factory=list)


@dataclass
class RouteConfig(EnvoyObject):
    name: str = _field("name", default="")
    virtual_hosts: list[VirtualHost] = _field("virtual_hosts", factory=list)


@dataclass
class AdminServer(EnvoyObject):
    access_log_path: str = _field("access_log_path", default="")
    address: Address = _field("address", factory=Address)


@dataclass
class HTTPFilterConfig(EnvoyObject):
    name: str = _field("name", default="")
    typed_config: DynamicValue = _field("typed_config", omitempty=True, factory=DynamicValue)


@dataclass
class StaticResources(EnvoyObject):
    listeners: list[Listener] = _field("listeners", factory=list)
    clusters: list[Cluster] = _field("clusters", factory=list)


@dataclass
class BootstrapConfig(EnvoyObject):
    """The complete Envoy bootstrap configuration."""

    admin: AdminServer = _field("admin", factory=AdminServer)
    static_resources: StaticResources = _field("static_resources", factory=StaticResources)


@dataclass
class HTTPConnectionManager(EnvoyObject):
    type: str = _field("@type", default="")
    stat_prefix: str = _field("stat_prefix", default="")
    codec_type: str = _field("codec_type", default="")
    route_config: RouteConfig = _field("route_config", factory=RouteConfig)
    http_filters: list[HTTPFilterConfig] = _field("http_filters", factory=list)