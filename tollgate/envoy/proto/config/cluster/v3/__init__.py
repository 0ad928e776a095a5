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

"""Package tollgate.envoy.proto.config.cluster.v3 provides types for the
`envoy.config.cluster.v3` (and the endpoint subset of `envoy.config.endpoint.v3`) Protobuf
packages.

This is hand-written, and thus incomplete.

"""

from typing import List, Literal, TypedDict

import tollgate.envoy.proto.config.core.v3 as corev3
import tollgate.envoy.proto.wkt as wkt

# DiscoveryType is a `envoy.config.cluster.v3.Cluster.DiscoveryType`.
DiscoveryType = Literal["STATIC", "STRICT_DNS", "LOGICAL_DNS", "EDS", "ORIGINAL_DST"]


class Endpoint(TypedDict):
    address: corev3.Address  # = 1


class LbEndpoint(TypedDict):
    endpoint: Endpoint  # = 1


class LocalityLbEndpoints(TypedDict):
    lb_endpoints: List[LbEndpoint]  # = 2


class ClusterLoadAssignment(TypedDict):
    """ClusterLoadAssignment is a (subset of) `envoy.config.endpoint.v3.ClusterLoadAssignment`."""

    cluster_name: str  # = 1
    endpoints: List[LocalityLbEndpoints]  # = 2


class Cluster(TypedDict, total=False):
    """Cluster is a (subset of) `envoy.config.cluster.v3.Cluster`."""

    name: str  # = 1
    type: DiscoveryType  # = 2
    connect_timeout: wkt.Duration  # = 4
    lb_policy: str  # = 6
    dns_lookup_family: str  # = 17
    transport_socket: corev3.TransportSocket  # = 24
    load_assignment: ClusterLoadAssignment  # = 33
