# Copyright 2026 Datawire.  All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License

from functools import singledispatch
from typing import Any, Dict, List

import tollgate.envoy.proto.extensions.filters.http.jwt_authn.v3 as jwtv3
import tollgate.envoy.proto.extensions.filters.http.wasm.v3 as httpwasmv3
import tollgate.envoy.proto.extensions.filters.network.http_connection_manager.v3 as hcmv3

from ..service import OIDCProvider, ThreescaleProvider
from .encoder import typed_config

JWT_AUTHN_FILTER = "envoy.filters.http.jwt_authn"
WASM_FILTER = "envoy.filters.http.wasm"
ROUTER_FILTER = "envoy.filters.http.router"


def http_filter(name: str, type_url: str, payload: Dict[str, Any]) -> hcmv3.HttpFilter:
    return {"name": name, "typed_config": typed_config(type_url, payload)}


def wasm_filter(wasm: httpwasmv3.Wasm) -> hcmv3.HttpFilter:
    return http_filter(WASM_FILTER, httpwasmv3.WASM_TYPE, dict(wasm))


def router_filter() -> hcmv3.HttpFilter:
    return http_filter(ROUTER_FILTER, hcmv3.ROUTER_TYPE, {})


@singledispatch
def ProviderHTTPFilter(provider: Any, payload: Dict[str, Any]) -> hcmv3.HttpFilter:
    raise TypeError(f"no HTTP filter for provider {type(provider).__name__}")


@ProviderHTTPFilter.register
def ProviderHTTPFilter_oidc(provider: OIDCProvider, payload: jwtv3.JwtAuthentication) -> hcmv3.HttpFilter:
    del provider  # silence unused-variable warning

    return http_filter(JWT_AUTHN_FILTER, jwtv3.JWT_AUTHN_TYPE, dict(payload))


@ProviderHTTPFilter.register
def ProviderHTTPFilter_threescale(provider: ThreescaleProvider, payload: httpwasmv3.Wasm) -> hcmv3.HttpFilter:
    del provider  # silence unused-variable warning

    return wasm_filter(payload)


def compose_http_filters(
    provider_filters: List[hcmv3.HttpFilter], metering: httpwasmv3.Wasm
) -> List[hcmv3.HttpFilter]:
    """
    Assemble the HTTP filter chain for one listener. Envoy runs HTTP filters in order
    and the router must be the last one, so the chain is always:

    1. one filter per capability provider, in provider order (identity before billing,
       since billing may rely on an authenticated identity);
    2. the metering filter;
    3. the router.

    Provider filters may not include a router of their own.
    """

    for f in provider_filters:
        if f["name"] == ROUTER_FILTER:
            raise ValueError("provider filters must not include the router")

    return [*provider_filters, wasm_filter(metering), router_filter()]
