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

from typing import TYPE_CHECKING, List

import tollgate.envoy.proto.config.listener.v3 as listenerv3
import tollgate.envoy.proto.config.route.v3 as routev3
import tollgate.envoy.proto.extensions.filters.network.http_connection_manager.v3 as hcmv3

from ..config import Settings
from .encoder import typed_config

if TYPE_CHECKING:
    from ..service import Service  # pragma: no cover


def service_route_config(service: "Service") -> routev3.RouteConfiguration:
    # All the policy lives in the HTTP filters: routing is just "the right Host goes
    # to this service's cluster".
    return {
        "name": f"service_{service.id}_route",
        "virtual_hosts": [
            {
                "name": f"service_{service.id}_vhost",
                "domains": list(service.hosts),
                "routes": [
                    {
                        "match": {"prefix": "/"},
                        "route": {"cluster": service.cluster_name},
                    }
                ],
            }
        ],
    }


def service_listener(
    service: "Service", http_filters: List[hcmv3.HttpFilter], settings: Settings
) -> listenerv3.Listener:
    http_config: hcmv3.HttpConnectionManager = {
        "codec_type": "AUTO",
        "stat_prefix": settings.stat_prefix,
        "http_filters": http_filters,
        "route_config": service_route_config(service),
    }

    return {
        "name": f"service {service.id}",
        "address": {
            "socket_address": {
                "address": settings.listener_address,
                "port_value": settings.listener_port,
                "protocol": "TCP",
            }
        },
        "filter_chains": [
            {
                "filters": [
                    {
                        "name": "envoy.filters.network.http_connection_manager",
                        "typed_config": typed_config(hcmv3.HCM_TYPE, dict(http_config)),
                    }
                ]
            }
        ],
    }
