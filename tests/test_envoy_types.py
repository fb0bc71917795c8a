import pytest

from kode_operator.envoy_types import (
    AccessLog,
    Address,
    AdminServer,
    BootstrapConfig,
    Cluster,
    DynamicValue,
    Endpoint,
    Filter,
    FilterChain,
    HealthCheckConfig,
    HTTPConnectionManager,
    HTTPFilterConfig,
    LbEndpoint,
    Listener,
    LoadAssignment,
    LocalityLbEndpoints,
    Match,
    Pipe,
    Redirect,
    Route,
    RouteConfig,
    SingleRoute,
    SocketAddress,
    StaticResources,
    VirtualHost,
)


def _local_cluster():
    return Cluster(
        name="local_service",
        connect_timeout="0.25s",
        type="STATIC",
        lb_policy="ROUND_ROBIN",
        load_assignment=LoadAssignment(
            cluster_name="local_service",
            endpoints=[
                LocalityLbEndpoints(
                    lb_endpoints=[
                        LbEndpoint(
                            endpoint=Endpoint(
                                address=Address(
                                    socket_address=SocketAddress(address="127.0.0.1", port_value=3000)
                                )
                            )
                        )
                    ]
                )
            ],
        ),
    )


def test_socket_address_omits_empty_fields():
    assert SocketAddress(address="0.0.0.0").to_dict() == {"address": "0.0.0.0"}
    assert SocketAddress(address="0.0.0.0", port_value=9901).to_dict() == {
        "address": "0.0.0.0",
        "port_value": 9901,
    }


def test_address_omits_zero_pipe_and_internal_address():
    addr = Address(socket_address=SocketAddress(address="127.0.0.1", port_value=9001))
    assert addr.to_dict() == {"socket_address": {"address": "127.0.0.1", "port_value": 9001}}


def test_address_keeps_pipe_when_set():
    addr = Address(pipe=Pipe(path="/run/envoy.sock"))
    assert addr.to_dict()["pipe"] == {"path": "/run/envoy.sock"}
    assert addr.to_dict()["socket_address"] == {"address": ""}


def test_route_without_target_omits_route_and_redirect():
    assert Route(match=Match(prefix="/")).to_dict() == {"match": {"prefix": "/"}}


def test_route_with_single_route_and_redirect():
    route = Route(match=Match(prefix="/"), route=SingleRoute(cluster="local_service"), redirect=Redirect(https_redirect=True))
    assert route.to_dict() == {
        "match": {"prefix": "/"},
        "route": {"cluster": "local_service"},
        "redirect": {"https_redirect": True},
    }


def test_health_check_config_omitted_when_zero_and_kept_otherwise():
    assert "health_check_config" not in Endpoint().to_dict()
    endpoint = Endpoint(health_check_config=HealthCheckConfig(hostname="svc"))
    assert endpoint.to_dict()["health_check_config"] == {"port_value": 0, "hostname": "svc"}


def test_http_connection_manager_uses_at_type_key():
    manager = HTTPConnectionManager(
        type="type.googleapis.com/envoy.extensions.filters.network.http_connection_manager.v3.HttpConnectionManager",
        stat_prefix="ingress_http",
        codec_type="AUTO",
    )
    out = manager.to_dict()
    assert list(out) == ["@type", "stat_prefix", "codec_type", "route_config", "http_filters"]
    assert out["@type"].endswith("HttpConnectionManager")
    assert out["http_filters"] == []


def test_dynamic_value_wraps_value():
    payload = {"@type": "type.googleapis.com/envoy.extensions.filters.http.router.v3.Router"}
    dv = DynamicValue.from_dict(payload)
    assert dv.value == payload
    assert dv.to_dict() == payload


def test_http_filter_config_omits_empty_typed_config():
    assert HTTPFilterConfig(name="envoy.filters.http.router").to_dict() == {"name": "envoy.filters.http.router"}


def test_access_log_keeps_null_typed_config():
    assert AccessLog(name="stdout").to_dict() == {"name": "stdout", "typed_config": None}


def test_filter_typed_config_inlined():
    f = Filter(name="envoy.filters.network.http_connection_manager", typed_config=DynamicValue({"stat_prefix": "ingress_http"}))
    assert f.to_dict() == {
        "name": "envoy.filters.network.http_connection_manager",
        "typed_config": {"stat_prefix": "ingress_http"},
    }


def test_cluster_to_dict_shape():
    out = _local_cluster().to_dict()
    assert "typed_extension_protocol_options" not in out
    endpoint = out["load_assignment"]["endpoints"][0]["lb_endpoints"][0]["endpoint"]
    assert endpoint == {"address": {"socket_address": {"address": "127.0.0.1", "port_value": 3000}}}


def test_bootstrap_round_trip():
    config = BootstrapConfig(
        admin=AdminServer(
            access_log_path="/dev/stdout",
            address=Address(socket_address=SocketAddress(address="0.0.0.0", port_value=9901)),
        ),
        static_resources=StaticResources(
            listeners=[
                Listener(
                    name="listener_0",
                    address=Address(socket_address=SocketAddress(address="0.0.0.0", port_value=8000)),
                    filter_chains=[
                        FilterChain(
                            filters=[
                                Filter(
                                    name="envoy.filters.network.http_connection_manager",
                                    typed_config=DynamicValue({"stat_prefix": "ingress_http"}),
                                )
                            ]
                        )
                    ],
                )
            ],
            clusters=[_local_cluster()],
        ),
    )
    data = config.to_dict()
    assert BootstrapConfig.from_dict(data) == config
    assert BootstrapConfig.from_dict(data).to_dict() == data


def test_route_config_round_trip():
    rc = RouteConfig(
        name="local_route",
        virtual_hosts=[
            VirtualHost(
                name="local_service",
                domains=["*"],
                routes=[Route(match=Match(prefix="/"), route=SingleRoute(cluster="local_service"))],
            )
        ],
    )
    assert RouteConfig.from_dict(rc.to_dict()) == rc


def test_from_dict_ignores_unknown_keys_and_fills_defaults():
    sa = SocketAddress.from_dict({"address": "10.0.0.1", "unknown": 1})
    assert sa == SocketAddress(address="10.0.0.1")


def test_from_dict_null_nested_takes_zero_value():
    ep = Endpoint.from_dict({"address": None, "additional_addresses": None})
    assert ep == Endpoint()


def test_from_dict_rejects_non_mapping():
    with pytest.raises(TypeError):
        Cluster.from_dict(["not", "a", "mapping"])


def test_from_dict_rejects_wrong_field_type():
    with pytest.raises(TypeError):
        SocketAddress.from_dict({"address": "0.0.0.0", "port_value": "9901"})


def test_from_dict_rejects_negative_unsigned():
    with pytest.raises(ValueError):
        SocketAddress.from_dict({"address": "0.0.0.0", "port_value": -1})


def test_from_dict_rejects_non_list_for_list_field():
    with pytest.raises(TypeError):
        VirtualHost.from_dict({"name": "x", "domains": "*"})


def test_default_objects_do_not_share_lists():
    a = StaticResources()
    b = StaticResources()
    a.clusters.append(_local_cluster())
    assert b.clusters == []