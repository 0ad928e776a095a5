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

########
# The 3scale billing/auth backend: a cluster for the 3scale backend itself, and the
# 3scale WASM module that talks to it.
########

import logging
import os

import tollgate.envoy.proto.config.cluster.v3 as clusterv3
import tollgate.envoy.proto.extensions.filters.http.wasm.v3 as httpwasmv3

from ..config import Settings
from ..envoy.encoder import build_cluster
from ..envoy.wasm import build_wasm_plugin
from ..errors import AssetIntegrityFailure
from ..service import ThreescaleAuth
from ..utils import dump_json

logger = logging.getLogger("tollgate.threescale")

# The 3scale module doesn't read its VM configuration, but Envoy wants one.
VM_CONFIGURATION = "vm config"


def cluster(auth: ThreescaleAuth, settings: Settings) -> clusterv3.Cluster:
    backend = auth.backend
    return build_cluster(backend.cluster_name, backend.url, settings.connect_timeout_ms)


def build_plugin(auth: ThreescaleAuth, service_id: int, settings: Settings) -> httpwasmv3.Wasm:
    filename = os.path.basename(auth.path)

    if not filename:
        logger.error("service %d: 3scale module path %r has no file name", service_id, auth.path)
        raise AssetIntegrityFailure(service_id, f"failed to obtain file name of {auth.path}")

    logger.debug("service %d: 3scale module %s", service_id, auth.path)

    return build_wasm_plugin(
        service_id,
        f"threescale::{service_id}",
        auth.path,
        settings.static_url(f"static/{filename}"),
        settings,
        configuration=dump_json(auth.wasm_config(), pretty=True),
        vm_configuration=VM_CONFIGURATION,
    )
