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

"""Package tollgate.envoy.proto.config.listener.v3 provides types for the
`envoy.config.listener.v3` Protobuf package.

This is hand-written, and thus incomplete.

"""

from typing import Any, List, TypedDict

import tollgate.envoy.proto.config.core.v3 as corev3


class Filter(TypedDict):
    """Filter is a (subset of) `envoy.config.listener.v3.Filter`."""

    name: str  # = 1
    typed_config: Any  # = 4


class FilterChain(TypedDict, total=False):
    """FilterChain is a (subset of) `envoy.config.listener.v3.FilterChain`."""

    filters: List[Filter]  # = 3
    name: str  # = 7


class Listener(TypedDict, total=False):
    """Listener is a (subset of) `envoy.config.listener.v3.Listener`."""

    name: str  # = 1
    address: corev3.Address  # = 2
    filter_chains: List[FilterChain]  # = 3
