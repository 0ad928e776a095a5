import hashlib
import logging

import pytest

from tollgate import (
    AdapterFailure,
    AssetIntegrityFailure,
    EncodingFailure,
    ExportError,
    Service,
    export,
    export_all,
    load_services,
)
from tollgate.utils import parse_json

from utils import ISSUER, METERING_MODULE, find_export, hcm_config, http_filter_names, http_filters, make_service

JWT = "envoy.filters.http.jwt_authn"
WASM = "envoy.filters.http.wasm"
ROUTER = "envoy.filters.http.router"


@pytest.mark.compilertest
def test_bare_service_exports_cluster_and_listener(settings, discovery):
    exports = export(make_service(), settings=settings, discovery=discovery)

    assert [e.key for e in exports] == ["service::id::42::cluster", "service::id::42::listener"]
    assert [e.config.kind for e in exports] == ["cluster", "listener"]
    assert http_filter_names(exports) == [WASM, ROUTER]

    # No providers, no discovery.
    assert discovery.calls == []


@pytest.mark.compilertest
def test_all_providers(settings, discovery):
    exports = export(make_service(oidc=True, threescale=True), settings=settings, discovery=discovery)

    assert [e.key for e in exports] == [
        "service::id::42::cluster",
        "oidc::idp.example.com:443",
        "3scale-backend",
        "service::id::42::listener",
    ]
    assert discovery.calls == [(ISSUER, 42)]

    filters = http_filters(exports)
    assert [f["name"] for f in filters] == [JWT, WASM, WASM, ROUTER]

    # The first WASM filter is 3scale, the second is metering.
    assert filters[1]["typed_config"]["config"]["root_id"] == "threescale::42"
    assert filters[2]["typed_config"]["config"]["root_id"] == "Service::42"

    assert filters[-1]["typed_config"]["@type"] == (
        "type.googleapis.com/envoy.extensions.filters.http.router.v3.Router"
    )


@pytest.mark.compilertest
@pytest.mark.parametrize(
    "oidc,threescale,expected",
    [
        (False, False, [WASM, ROUTER]),
        (True, False, [JWT, WASM, ROUTER]),
        (False, True, [WASM, WASM, ROUTER]),
        (True, True, [JWT, WASM, WASM, ROUTER]),
    ],
)
def test_filter_order(settings, discovery, oidc, threescale, expected):
    exports = export(make_service(oidc=oidc, threescale=threescale), settings=settings, discovery=discovery)

    assert http_filter_names(exports) == expected
    assert len(exports) == 2 + int(oidc) + int(threescale)


@pytest.mark.compilertest
def test_export_is_deterministic(settings, discovery):
    service = make_service(oidc=True, threescale=True)

    first = export(service, settings=settings, discovery=discovery)
    second = export(service, settings=settings, discovery=discovery)

    assert [e.key for e in first] == [e.key for e in second]
    assert [e.encoded() for e in first] == [e.encoded() for e in second]


@pytest.mark.compilertest
def test_service_cluster(settings, discovery):
    exports = export(make_service(), settings=settings, discovery=discovery)
    cluster = find_export(exports, "service::id::42::cluster").config.resource

    assert cluster["name"] == "Cluster::service::42"
    assert cluster["type"] == "LOGICAL_DNS"

    endpoint = cluster["load_assignment"]["endpoints"][0]["lb_endpoints"][0]["endpoint"]
    assert endpoint["address"]["socket_address"]["address"] == "widgets.internal"
    assert endpoint["address"]["socket_address"]["port_value"] == 8080


@pytest.mark.compilertest
def test_listener(settings, discovery):
    exports = export(make_service(), settings=settings, discovery=discovery)
    listener = find_export(exports, "service::id::42::listener").config.resource

    assert listener["name"] == "service 42"
    assert listener["address"]["socket_address"]["address"] == "0.0.0.0"
    assert listener["address"]["socket_address"]["port_value"] == 80

    hcm = hcm_config(listener)
    assert hcm["stat_prefix"] == "ingress_http"

    route_config = hcm["route_config"]
    assert route_config["name"] == "service_42_route"

    vhosts = route_config["virtual_hosts"]
    assert len(vhosts) == 1
    assert vhosts[0]["domains"] == ["widgets.example.com", "www.widgets.example.com"]
    assert vhosts[0]["routes"] == [
        {"match": {"prefix": "/"}, "route": {"cluster": "Cluster::service::42"}}
    ]


@pytest.mark.compilertest
def test_metering_filter_carries_service(settings, discovery):
    service = make_service(oidc=True, threescale=True)
    exports = export(service, settings=settings, discovery=discovery)

    metering = http_filters(exports)[-2]["typed_config"]["config"]
    configuration = metering["configuration"]

    assert configuration["@type"] == "type.googleapis.com/google.protobuf.StringValue"
    assert Service.from_dict(parse_json(configuration["value"])) == service

    remote = metering["vm_config"]["code"]["remote"]
    assert remote["sha256"] == hashlib.sha256(METERING_MODULE).hexdigest()


@pytest.mark.compilertest
def test_policy_with_non_string_keys(settings, discovery):
    # YAML turns "404: not_found" into an int key; the metering config still carries it.
    (service,) = load_services(
        """
id: 42
hosts: [widgets.example.com]
target_domain: widgets.internal
policies:
- name: status_map
  configuration: {404: not_found}
"""
    )

    exports = export(service, settings=settings, discovery=discovery)

    configuration = parse_json(http_filters(exports)[-2]["typed_config"]["config"]["configuration"]["value"])
    assert configuration["policies"] == [{"name": "status_map", "configuration": {"404": "not_found"}}]


@pytest.mark.compilertest
def test_unencodable_policy(settings, discovery):
    # JSON can't carry integers wider than 64 bits.
    service = make_service(policies=[{"name": "limits", "configuration": {"max": 2**70}}])

    with pytest.raises(EncodingFailure) as excinfo:
        export(service, settings=settings, discovery=discovery)

    assert excinfo.value.service_id == 42
    assert "metering filter" in str(excinfo.value)


@pytest.mark.compilertest
def test_listener_port_from_settings(workdir, discovery):
    from tollgate import Settings

    settings = Settings(listener_port=10080, stat_prefix="edge")
    exports = export(make_service(), settings=settings, discovery=discovery)
    listener = exports[-1].config.resource

    assert listener["address"]["socket_address"]["port_value"] == 10080
    assert hcm_config(listener)["stat_prefix"] == "edge"


@pytest.mark.compilertest
def test_bad_target_domain(settings, discovery):
    with pytest.raises(EncodingFailure) as excinfo:
        export(make_service(target_domain="widgets.internal:notaport"), settings=settings, discovery=discovery)

    assert excinfo.value.service_id == 42
    assert "service 42" in str(excinfo.value)


@pytest.mark.compilertest
def test_discovery_failure(settings):
    def broken_discovery(issuer, service_id):
        raise ValueError("no jwks_uri")

    with pytest.raises(AdapterFailure) as excinfo:
        export(make_service(oidc=True), settings=settings, discovery=broken_discovery)

    assert excinfo.value.service_id == 42
    assert excinfo.value.adapter == "oidc"
    assert "no jwks_uri" in str(excinfo.value)


@pytest.mark.compilertest
def test_missing_metering_module(workdir, discovery):
    (workdir / "static" / "filter.wasm").unlink()

    from tollgate import Settings

    with pytest.raises(AssetIntegrityFailure) as excinfo:
        export(make_service(), settings=Settings(), discovery=discovery)

    assert excinfo.value.service_id == 42


@pytest.mark.compilertest
def test_failure_is_logged_once(workdir, discovery, caplog):
    (workdir / "static" / "filter.wasm").unlink()

    from tollgate import Settings

    with pytest.raises(AssetIntegrityFailure):
        export(make_service(), settings=Settings(), discovery=discovery)

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "filter.wasm" in errors[0].getMessage()


@pytest.mark.compilertest
def test_missing_threescale_module(workdir, settings, discovery):
    (workdir / "threescale_wasm_auth.wasm").unlink()

    with pytest.raises(AssetIntegrityFailure) as excinfo:
        export(make_service(threescale=True), settings=settings, discovery=discovery)

    assert excinfo.value.service_id == 42


@pytest.mark.compilertest
def test_bad_threescale_backend_url(settings, discovery):
    service = make_service(threescale=True)
    # A descriptor can only carry a bad backend address if it skipped validation, so
    # build one by hand.
    from dataclasses import replace

    backend = replace(service.auth_config.backend, url="https://")
    service = replace(service, auth_config=replace(service.auth_config, backend=backend))

    with pytest.raises(AdapterFailure) as excinfo:
        export(service, settings=settings, discovery=discovery)

    assert excinfo.value.adapter == "threescale"


@pytest.mark.compilertest
def test_export_all_shares_oidc_cluster(settings, discovery):
    services = [make_service(oidc=True), make_service(oidc=True, id=43, hosts=["gadgets.example.com"])]

    exports = export_all(services, settings=settings, discovery=discovery)

    assert list(exports.keys()) == [
        "service::id::42::cluster",
        "oidc::idp.example.com:443",
        "service::id::42::listener",
        "service::id::43::cluster",
        "service::id::43::listener",
    ]


@pytest.mark.compilertest
def test_export_all_rejects_duplicate_ids(settings, discovery):
    with pytest.raises(ExportError) as excinfo:
        export_all([make_service(), make_service()], settings=settings, discovery=discovery)

    assert excinfo.value.service_id == 42
    assert "duplicate" in str(excinfo.value)


def test_export_as_dict(settings, discovery):
    exports = export(make_service(), settings=settings, discovery=discovery)

    d = exports[0].as_dict()
    assert d["key"] == "service::id::42::cluster"
    assert d["cluster"]["name"] == "Cluster::service::42"

    d = exports[1].as_dict()
    assert d["listener"]["name"] == "service 42"
