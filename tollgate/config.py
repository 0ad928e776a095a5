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

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from .utils import parse_bool

logger = logging.getLogger("tollgate.config")


@dataclass(frozen=True)
class Settings:
    """
    Process-wide knobs for the export engine. Everything here has a default that
    matches the stock control-plane deployment, and every field can be overridden
    from the environment with TOLLGATE_<FIELD NAME IN CAPS>.
    """

    # Where the data plane fetches WASM modules from, and through which cluster.
    control_plane_url: str = "http://control-plane-main:5001"
    wasm_files_cluster: str = "wasm_files"
    wasm_fetch_timeout: int = 100

    # The bundled metering filter, relative to the control plane's working directory.
    # It's served at <control_plane_url>/<wasm_filter_path>.
    wasm_filter_path: str = "static/filter.wasm"
    wasm_runtime: str = "envoy.wasm.runtime.v8"

    listener_address: str = "0.0.0.0"
    listener_port: int = 80
    stat_prefix: str = "ingress_http"

    connect_timeout_ms: int = 5000

    # Timeout, in seconds, for each HTTP request made during OIDC discovery.
    oidc_timeout: float = 5.0

    debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        if environ is None:
            environ = os.environ

        overrides: Dict[str, Any] = {}

        for f in fields(cls):
            envvar = "TOLLGATE_" + f.name.upper()
            value = environ.get(envvar, None)

            if value is None:
                continue

            default = f.default

            try:
                if isinstance(default, bool):
                    overrides[f.name] = parse_bool(value)
                elif isinstance(default, int):
                    overrides[f.name] = int(value)
                elif isinstance(default, float):
                    overrides[f.name] = float(value)
                else:
                    overrides[f.name] = value
            except ValueError:
                logger.warning("ignoring %s: %r is not a valid %s", envvar, value, type(default).__name__)

        return cls(**overrides)

    def static_url(self, path: str) -> str:
        return "%s/%s" % (self.control_plane_url.rstrip("/"), path.lstrip("/"))
