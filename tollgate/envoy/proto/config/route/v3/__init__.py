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

"""Package tollgate.envoy.proto.config.route.v3 provides types for the `envoy.config.route.v3`
Protobuf package.

This is hand-written, and thus incomplete.

"""

from typing import List, TypedDict


class RouteMatch(TypedDict, total=False):
    """RouteMatch is a (subset of) `envoy.config.route.v3.RouteMatch`."""

    # oneof path_specifier {
    prefix: str  # = 1
    path: str  # = 2
    # }


class RouteAction(TypedDict, total=False):
    """RouteAction is a (subset of) `envoy.config.route.v3.RouteAction`."""

    cluster: str  # = 1


class Route(TypedDict, total=False):
    """Route is a (subset of) `envoy.config.route.v3.Route`."""

    match: RouteMatch  # = 1
    route: RouteAction  # = 2


class VirtualHost(TypedDict):
    """VirtualHost is a (subset of) `envoy.config.route.v3.VirtualHost`."""

    name: str  # = 1
    domains: List[str]  # = 2
    routes: List[Route]  # = 3


class RouteConfiguration(TypedDict):
    """RouteConfiguration is a (subset of) `envoy.config.route.v3.RouteConfiguration`."""

    name: str  # = 1
    virtual_hosts: List[VirtualHost]  # = 2
