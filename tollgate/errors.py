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

from typing import Optional


class TollgateError(Exception):
    """
    Base class for everything tollgate raises on purpose.
    """


class ExportError(TollgateError):
    """
    A Service could not be exported. Export is all-or-nothing, so any ExportError
    means no resources at all were produced for service_id.
    """

    def __init__(self, service_id: Optional[int], message: str) -> None:
        super().__init__(message)
        self.service_id = service_id
        self.message = message

    def __str__(self) -> str:
        return f"service {self.service_id}: {self.message}"


class AdapterFailure(ExportError):
    """
    The identity-discovery or billing backend adapter failed.
    """

    def __init__(self, service_id: Optional[int], adapter: str, message: str) -> None:
        super().__init__(service_id, message)
        self.adapter = adapter

    def __str__(self) -> str:
        return f"service {self.service_id}: {self.adapter}: {self.message}"


class EncodingFailure(ExportError):
    """
    A resource couldn't be built or serialized. This is a bug or a bad address,
    never a transient condition.
    """


class AssetIntegrityFailure(ExportError):
    """
    A WASM module couldn't be opened or hashed, so we can't hand Envoy a
    verifiable RemoteDataSource for it.
    """


class ConfigImportError(TollgateError):
    """
    The data-plane engine refused a new configuration. The previous configuration
    is still active.
    """


class ConfigParseFailure(ConfigImportError):
    pass


class ConfigBusy(ConfigImportError):
    """
    The configuration cell was held by someone else, and imports never wait.
    """
