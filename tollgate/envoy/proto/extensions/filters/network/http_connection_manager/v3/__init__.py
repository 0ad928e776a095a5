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

"""Package tollgate.envoy.proto.extensions.filters.network.http_connection_manager.v3 provides
types for the `envoy.extensions.filters.network.http_connection_manager.v3` Protobuf package.

This is hand-written, and thus incomplete.

"""

from typing import Any, List, TypedDict

import tollgate.envoy.proto.config.route.v3 as routev3

HCM_TYPE = "type.googleapis.com/envoy.extensions.filters.network.http_connection_manager.v3.HttpConnectionManager"
ROUTER_TYPE = "type.googleapis.com/envoy.extensions.filters.http.router.v3.Router"


class HttpFilter(TypedDict):
    """HttpFilter is a (subset of) `...http_connection_manager.v3.HttpFilter`."""

    name: str  # = 1
    typed_config: Any  # = 4


class HttpConnectionManager(TypedDict, total=False):
    """HttpConnectionManager is a (subset of) `...http_connection_manager.v3.HttpConnectionManager`."""

    codec_type: str  # = 1
    stat_prefix: str  # = 2

    # oneof route_specifier {
    route_config: routev3.RouteConfiguration  # = 4
    # }

    http_filters: List[HttpFilter]  # = 5
