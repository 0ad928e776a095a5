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
# WASM plugin descriptors. Every WASM module we hand to Envoy is fetched from the control
# plane over HTTP, so every descriptor carries the SHA-256 of the module as we serve it:
# Envoy refuses to load anything that doesn't match.
########

import logging
from typing import TYPE_CHECKING, Optional

import tollgate.envoy.proto.extensions.filters.http.wasm.v3 as httpwasmv3
import tollgate.envoy.proto.extensions.wasm.v3 as wasmv3

from ..config import Settings
from ..errors import AssetIntegrityFailure
from ..utils import file_sha256
from .encoder import duration, encode, string_value

if TYPE_CHECKING:
    from ..service import Service  # pragma: no cover

logger = logging.getLogger("tollgate.wasm")


def build_wasm_plugin(
    service_id: int,
    name: str,
    code_path: str,
    code_url: str,
    settings: Settings,
    configuration: Optional[str] = None,
    vm_configuration: Optional[str] = None,
) -> httpwasmv3.Wasm:
    """
    Build a Wasm filter config whose VM loads the module at code_path, as served from
    code_url. name is used for the plugin name, its root ID, and the VM ID.

    :param service_id: the Service this plugin belongs to, for error reporting
    :param configuration: plugin-level configuration (delivered to the plugin's on_configure)
    :param vm_configuration: VM-level configuration (delivered to the VM's on_vm_start)
    """

    try:
        sha256 = file_sha256(code_path)
    except OSError as e:
        logger.error("service %s: could not hash WASM module %s: %s", service_id, code_path, e)
        raise AssetIntegrityFailure(service_id, f"could not compute SHA-256 of {code_path}: {e}") from e

    vm_config: wasmv3.VmConfig = {
        "vm_id": name,
        "runtime": settings.wasm_runtime,
        "code": {
            "remote": {
                "http_uri": {
                    "uri": code_url,
                    "cluster": settings.wasm_files_cluster,
                    "timeout": duration(settings.wasm_fetch_timeout),
                },
                "sha256": sha256,
            }
        },
    }

    if vm_configuration is not None:
        vm_config["configuration"] = string_value(vm_configuration)

    plugin: wasmv3.PluginConfig = {
        "name": name,
        "root_id": name,
        "vm_config": vm_config,
    }

    if configuration is not None:
        plugin["configuration"] = string_value(configuration)

    return {"config": plugin}


def metering_plugin(service: "Service", settings: Settings) -> httpwasmv3.Wasm:
    """
    Build the bundled usage-metering filter for service. Its plugin configuration is the
    whole Service, serialized, which is where the data plane gets its mapping rules.
    """

    return build_wasm_plugin(
        service.id,
        service.vm_name,
        settings.wasm_filter_path,
        settings.static_url(settings.wasm_filter_path),
        settings,
        configuration=encode(service.as_dict()).decode("utf-8"),
    )
