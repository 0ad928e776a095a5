import copy
from typing import Any, Dict, List, Optional

from tollgate import Service
from tollgate.envoy import EnvoyExport

METERING_MODULE = b"\x00asm\x01\x00\x00\x00metering"
THREESCALE_MODULE = b"\x00asm\x01\x00\x00\x00threescale"

ISSUER = "https://idp.example.com/auth/realms/tollgate"

BASE_SERVICE: Dict[str, Any] = {
    "id": 42,
    "hosts": ["widgets.example.com", "www.widgets.example.com"],
    "policies": [{"name": "cors", "configuration": {"allow_origin": ["*"]}}],
    "target_domain": "widgets.internal:8080",
    "proxy_rules": [
        {"pattern": "/widgets", "http_method": "GET", "metric_system_name": "hits", "delta": 1},
        {"pattern": "/widgets", "http_method": "POST", "metric_system_name": "creates", "delta": 5},
    ],
}

AUTH_CONFIG: Dict[str, Any] = {
    "path": "threescale_wasm_auth.wasm",
    "wasm_config": {
        "backend": {
            "cluster_name": "3scale-backend",
            "url": "https://su1.3scale.net",
            "timeout": 5000,
        },
        "services": [{"id": "2555417834789", "token": "sekrit", "authorities": ["*"]}],
    },
}


def service_dict(oidc: bool = False, threescale: bool = False, **overrides) -> Dict[str, Any]:
    d = copy.deepcopy(BASE_SERVICE)

    if oidc:
        d["oidc_issuer"] = ISSUER

    if threescale:
        d["auth_config"] = copy.deepcopy(AUTH_CONFIG)

    d.update(overrides)
    return d


def make_service(oidc: bool = False, threescale: bool = False, **overrides) -> Service:
    return Service.from_dict(service_dict(oidc=oidc, threescale=threescale, **overrides))


def find_export(exports: List[EnvoyExport], key: str) -> Optional[EnvoyExport]:
    for export in exports:
        if export.key == key:
            return export

    return None


def hcm_config(listener: Dict[str, Any]) -> Dict[str, Any]:
    chains = listener["filter_chains"]
    assert len(chains) == 1

    filters = chains[0]["filters"]
    assert len(filters) == 1
    assert filters[0]["name"] == "envoy.filters.network.http_connection_manager"

    return filters[0]["typed_config"]


def http_filters(exports: List[EnvoyExport]) -> List[Dict[str, Any]]:
    listener = exports[-1]
    assert listener.config.kind == "listener"

    return hcm_config(listener.config.resource)["http_filters"]


def http_filter_names(exports: List[EnvoyExport]) -> List[str]:
    return [f["name"] for f in http_filters(exports)]
