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

from .VERSION import Version
from .config import Settings
from .errors import (
    AdapterFailure,
    AssetIntegrityFailure,
    ConfigBusy,
    ConfigImportError,
    ConfigParseFailure,
    EncodingFailure,
    ExportError,
    TollgateError,
)
from .service import HTTPMethod, MappingRule, PolicyConfig, Service, ThreescaleAuth, load_services
from .envoy import EnvoyExport, EnvoyResource, Exporter, export, export_all, static_clusters
from .filter import MappingRuleEngine
