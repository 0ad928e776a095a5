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

import tollgate.envoy.proto.config.cluster.v3 as clusterv3

from ..config import Settings
from .encoder import build_cluster

if TYPE_CHECKING:
    from ..service import Service  # pragma: no cover


def service_cluster(service: "Service", settings: Settings) -> clusterv3.Cluster:
    return build_cluster(service.cluster_name, service.target_domain, settings.connect_timeout_ms)


def static_clusters(settings: Settings) -> List[clusterv3.Cluster]:
    """
    The clusters every data plane needs regardless of which services it carries:
    at present, just the one it fetches WASM modules through.
    """

    return [build_cluster(settings.wasm_files_cluster, settings.control_plane_url, settings.connect_timeout_ms)]
