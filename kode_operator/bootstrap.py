"""Generation of the Envoy bootstrap configuration used as a sidecar proxy."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

import yaml

from kode_operator.constants import DEFAULT_KODE_POD_PORT
from kode_operator.envoy_types import (
    Address,
    AdminServer,
    BootstrapConfig,
    Cluster,
    DynamicValue,
    Endpoint,
    Filter,
    FilterChain,
    HTTPConnectionManager,
    HTTPFilterConfig,
    LbEndpoint,
    Listener,
    LoadAssignment,
    LocalityLbEndpoints,
    Match,
    Route,
    RouteConfig,
    SingleRoute,
    SocketAddress,
    StaticResources,
    VirtualHost,
)

_HTTP_CONNECTION_MANAGER_TYPE = (
    "type.googleapis.com/envoy.extensions.filters.network.http_connection_manager.v3.HttpConnectionManager"
)
_EXT_AUTHZ_TYPE = "type.googleapis.com/envoy.extensions.filters.http.ext_authz.v3.ExtAuthz"
_ROUTER_TYPE = "type.googleapis.com/envoy.extensions.filters.http.router.v3.Router"

_ADMIN_PORT = 9901
_BASIC_AUTH_PORT = 9001
_MAX_PORT = 0xFFFFFFFF


def _dump(data: Any) -> str:
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


def _sorted_keys(value: Any) -> Any:
    """Return ``value`` with every nested mapping ordered by key."""
    if isinstance(value, Mapping):
        return {key: _sorted_keys(value[key]) for key in sorted(value, key=str)}
    if isinstance(value, list):
        return [_sorted_keys(item) for item in value]
    return value


def _static_cluster(name: str, port: int) -> Cluster:
    return Cluster(
        name=name,
        connect_timeout="0.25s",
        type="STATIC",
        lb_policy="ROUND_ROBIN",
        load_assignment=LoadAssignment(
            cluster_name=name,
            endpoints=[
                LocalityLbEndpoints(
                    lb_endpoints=[
                        LbEndpoint(
                            endpoint=Endpoint(
                                address=Address(
                                    socket_address=SocketAddress(address="127.0.0.1", port_value=port)
                                )
                            )
                        )
                    ]
                )
            ],
        ),
    )


class BootstrapConfigGenerator:
    """Builds the Envoy bootstrap YAML that fronts a Kode workspace."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log if log is not None else logging.getLogger(__name__)

    def generate_envoy_config(self, port: int, use_basic_auth: bool) -> str:
        """Return the complete bootstrap configuration as YAML.

        ``port`` is the port Envoy listens on; with ``use_basic_auth`` an
        external authorisation filter and its cluster are added.
        """
        if isinstance(port, bool) or not isinstance(port, int):
            raise TypeError(f"port must be an integer, got {type(port).__name__}")
        if not 0 <= port <= _MAX_PORT:
            raise ValueError(f"port out of range: {port}")

        connection_manager = HTTPConnectionManager(
            type=_HTTP_CONNECTION_MANAGER_TYPE,
            stat_prefix="ingress_http",
            codec_type="AUTO",
            route_config=RouteConfig(
                name="local_route",
                virtual_hosts=[
                    VirtualHost(
                        name="local_service",
                        domains=["*"],
                        routes=[
                            Route(
                                match=Match(prefix="/"),
                                route=SingleRoute(cluster="local_service"),
                            )
                        ],
                    )
                ],
            ),
            http_filters=self.http_filters(use_basic_auth),
        )
        # The manager is embedded as a generic mapping, which is emitted with ordered keys.
        connection_manager_map = _sorted_keys(yaml.safe_load(_dump(connection_manager.to_dict())))

        bootstrap = BootstrapConfig(
            admin=AdminServer(
                access_log_path="/dev/stdout",
                address=Address(socket_address=SocketAddress(address="0.0.0.0", port_value=_ADMIN_PORT)),
            ),
            static_resources=StaticResources(
                listeners=[
                    Listener(
                        name="listener_0",
                        address=Address(socket_address=SocketAddress(address="0.0.0.0", port_value=port)),
                        filter_chains=[
                            FilterChain(
                                filters=[
                                    Filter(
                                        name="envoy.filters.network.http_connection_manager",
                                        typed_config=DynamicValue(connection_manager_map),
                                    )
                                ]
                            )
                        ],
                    )
                ],
                clusters=self.clusters(use_basic_auth),
            ),
        )

        text = _dump(bootstrap.to_dict())
        self._log.debug(
            "Generated complete Envoy bootstrap config port=%s use_basic_auth=%s yaml=\n%s",
            port,
            use_basic_auth,
            text,
        )
        clusters_text = _dump([cluster.to_dict() for cluster in self.clusters(use_basic_auth)])
        self._log.debug(
            "Generated clusters config use_basic_auth=%s yaml=\n%s",
            use_basic_auth,
            clusters_text,
        )
        return text

    def http_filters(self, use_basic_auth: bool) -> list[HTTPFilterConfig]:
        """Return the HTTP filter chain, ending with the router."""
        filters: list[HTTPFilterConfig] = []
        if use_basic_auth:
            filters.append(
                HTTPFilterConfig(
                    name="envoy.filters.http.ext_authz",
                    typed_config=DynamicValue(
                        {
                            "@type": _EXT_AUTHZ_TYPE,
                            "grpc_service": {
                                "envoy_grpc": {"cluster_name": "basic_auth_service"},
                                "timeout": "0.25s",
                            },
                        }
                    ),
                )
            )
        filters.append(
            HTTPFilterConfig(
                name="envoy.filters.http.router",
                typed_config=DynamicValue({"@type": _ROUTER_TYPE}),
            )
        )
        return filters

    def clusters(self, use_basic_auth: bool) -> list[Cluster]:
        """Return the upstream clusters: the workspace, plus the auth service if enabled."""
        clusters = [_static_cluster("local_service", DEFAULT_KODE_POD_PORT)]
        if use_basic_auth:
            clusters.append(_static_cluster("basic_auth_service", _BASIC_AUTH_PORT))
        return clusters