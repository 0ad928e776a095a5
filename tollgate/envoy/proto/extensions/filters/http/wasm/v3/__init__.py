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

"""Package tollgate.envoy.proto.extensions.filters.http.wasm.v3 provides types for the
`envoy.extensions.filters.http.wasm.v3` Protobuf package.

This is hand-written, and thus incomplete.

"""

from typing import TypedDict

import tollgate.envoy.proto.extensions.wasm.v3 as wasmv3

WASM_TYPE = "type.googleapis.com/envoy.extensions.filters.http.wasm.v3.Wasm"


class Wasm(TypedDict):
    """Wasm is `envoy.extensions.filters.http.wasm.v3.Wasm`."""

    config: wasmv3.PluginConfig  # = 1
