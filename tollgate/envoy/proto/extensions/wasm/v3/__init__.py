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

"""Package tollgate.envoy.proto.extensions.wasm.v3 provides types for the
`envoy.extensions.wasm.v3` Protobuf package.

This is hand-written, and thus incomplete.

"""

from typing import TypedDict

import tollgate.envoy.proto.config.core.v3 as corev3
import tollgate.envoy.proto.wkt as wkt


class VmConfig(TypedDict, total=False):
    """VmConfig is a (subset of) `envoy.extensions.wasm.v3.VmConfig`."""

    vm_id: str  # = 1
    runtime: str  # = 2
    code: corev3.AsyncDataSource  # = 3
    configuration: wkt.StringValue  # = 4


class PluginConfig(TypedDict, total=False):
    """PluginConfig is a (subset of) `envoy.extensions.wasm.v3.PluginConfig`."""

    name: str  # = 1
    root_id: str  # = 2

    # oneof vm {
    vm_config: VmConfig  # = 3
    # }

    configuration: wkt.StringValue  # = 4
