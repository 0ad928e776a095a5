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

"""Package tollgate.envoy.proto.extensions.filters.http.jwt_authn.v3 provides types for the
`envoy.extensions.filters.http.jwt_authn.v3` Protobuf package.

This is hand-written, and thus incomplete.

"""

from typing import Dict, List, TypedDict

import tollgate.envoy.proto.config.core.v3 as corev3
import tollgate.envoy.proto.config.route.v3 as routev3
import tollgate.envoy.proto.wkt as wkt

JWT_AUTHN_TYPE = "type.googleapis.com/envoy.extensions.filters.http.jwt_authn.v3.JwtAuthentication"


class RemoteJwks(TypedDict, total=False):
    """RemoteJwks is a (subset of) `envoy.extensions.filters.http.jwt_authn.v3.RemoteJwks`."""

    http_uri: corev3.HttpUri  # = 1
    cache_duration: wkt.Duration  # = 2


class JwtProvider(TypedDict, total=False):
    """JwtProvider is a (subset of) `envoy.extensions.filters.http.jwt_authn.v3.JwtProvider`."""

    issuer: str  # = 1
    audiences: List[str]  # = 2

    # oneof jwks_source_specifier {
    remote_jwks: RemoteJwks  # = 3
    # }

    forward: bool  # = 5


class JwtRequirement(TypedDict, total=False):
    provider_name: str  # = 1


class RequirementRule(TypedDict):
    match: routev3.RouteMatch  # = 1
    requires: JwtRequirement  # = 2


class JwtAuthentication(TypedDict):
    """JwtAuthentication is a (subset of) `envoy.extensions.filters.http.jwt_authn.v3.JwtAuthentication`."""

    providers: Dict[str, JwtProvider]  # = 1
    rules: List[RequirementRule]  # = 2
