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
# The Service descriptor: the unit of configuration for both the export engine (which
# compiles it into Envoy resources) and the data-plane matcher (which gets it back,
# serialized, inside the metering filter's plugin configuration).
########

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type, Union
from urllib.parse import urlparse

import yaml

from .errors import ConfigParseFailure
from .utils import dump_json, parse_yaml

logger = logging.getLogger("tollgate.service")

# Largest delta a rule may carry; the data plane keeps counters as u32.
MAX_DELTA = 2**32 - 1


class HTTPMethod(enum.Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"
    OTHER = "OTHER"

    @classmethod
    def classify(cls, method: str) -> "HTTPMethod":
        # Note that this is case-sensitive, like HTTP itself: "get" is OTHER.
        try:
            member = cls(method)
        except ValueError:
            return cls.OTHER

        # "OTHER" is not a real method name.
        return cls.OTHER if member is cls.OTHER else member


def _require(d: Dict[str, Any], key: str, types: Union[Type, Tuple[Type, ...]], what: str) -> Any:
    if key not in d:
        raise ConfigParseFailure(f"{what}: missing required field {key}")

    value = d[key]

    # bool is an int, but never a valid id or delta.
    if (not isinstance(value, types)) or (isinstance(value, bool) and bool not in _astuple(types)):
        raise ConfigParseFailure(f"{what}: {key} must be {_typename(types)}, not {type(value).__name__}")

    return value


def _optional(d: Dict[str, Any], key: str, types: Union[Type, Tuple[Type, ...]], what: str, default: Any) -> Any:
    if d.get(key, None) is None:
        return default

    return _require(d, key, types, what)


def _astuple(types: Union[Type, Tuple[Type, ...]]) -> Tuple[Type, ...]:
    return types if isinstance(types, tuple) else (types,)


def _typename(types: Union[Type, Tuple[Type, ...]]) -> str:
    return " or ".join(t.__name__ for t in _astuple(types))


def _string_list(d: Dict[str, Any], key: str, what: str, required: bool) -> List[str]:
    value = _require(d, key, list, what) if required else _optional(d, key, list, what, [])

    for i, element in enumerate(value):
        if not isinstance(element, str):
            raise ConfigParseFailure(f"{what}: {key}[{i}] must be str, not {type(element).__name__}")

    return list(value)


@dataclass(frozen=True)
class MappingRule:
    """
    A MappingRule maps one exact HTTP method + path to a metering counter increment.

    Despite its name, pattern is compared for exact equality with the request path.
    """

    pattern: str
    http_method: str
    metric_system_name: str
    delta: int

    @property
    def method(self) -> HTTPMethod:
        return HTTPMethod.classify(self.http_method)

    def matches(self, method: str, path: str) -> bool:
        return (self.http_method == method) and (self.pattern == path)

    @classmethod
    def from_dict(cls, d: Any, what: str = "mapping rule") -> "MappingRule":
        if not isinstance(d, dict):
            raise ConfigParseFailure(f"{what}: must be a mapping, not {type(d).__name__}")

        delta = _require(d, "delta", int, what)

        if (delta < 0) or (delta > MAX_DELTA):
            raise ConfigParseFailure(f"{what}: delta {delta} out of range 0..{MAX_DELTA}")

        rule = cls(
            pattern=_require(d, "pattern", str, what),
            http_method=_require(d, "http_method", str, what),
            metric_system_name=_require(d, "metric_system_name", str, what),
            delta=delta,
        )

        if rule.method is HTTPMethod.OTHER:
            logger.warning("%s: unusual HTTP method %r, it will only match exactly", what, rule.http_method)

        return rule

    def as_dict(self) -> Dict[str, Any]:
        return {
            "pattern": self.pattern,
            "http_method": self.http_method,
            "metric_system_name": self.metric_system_name,
            "delta": self.delta,
        }


@dataclass(frozen=True)
class PolicyConfig:
    """
    A named policy. The configuration is carried along untouched.
    """

    name: str
    configuration: Any = None

    @classmethod
    def from_dict(cls, d: Any, what: str = "policy") -> "PolicyConfig":
        if not isinstance(d, dict):
            raise ConfigParseFailure(f"{what}: must be a mapping, not {type(d).__name__}")

        return cls(name=_require(d, "name", str, what), configuration=d.get("configuration", None))

    def as_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "configuration": self.configuration}


@dataclass(frozen=True)
class ThreescaleBackend:
    cluster_name: str
    url: str
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Any, what: str) -> "ThreescaleBackend":
        if not isinstance(d, dict):
            raise ConfigParseFailure(f"{what}: backend must be a mapping, not {type(d).__name__}")

        url = _require(d, "url", str, what)

        try:
            parsed = urlparse(url)
            # A malformed netloc only shows up once .hostname or .port is read.
            hostname, _ = parsed.hostname, parsed.port
        except ValueError as e:
            raise ConfigParseFailure(f"{what}: backend url {url!r} is malformed: {e}") from e

        if not (parsed.scheme and hostname):
            raise ConfigParseFailure(f"{what}: backend url {url!r} is not an absolute URL")

        extra = {k: v for k, v in d.items() if k not in ("cluster_name", "url")}

        return cls(cluster_name=_require(d, "cluster_name", str, what), url=url, extra=extra)

    def as_dict(self) -> Dict[str, Any]:
        return {**self.extra, "cluster_name": self.cluster_name, "url": self.url}


@dataclass(frozen=True)
class ThreescaleAuth:
    """
    The descriptor for a 3scale billing/auth backend: the local path of the 3scale
    WASM module, plus the configuration handed to that module. Anything we don't
    know about in wasm_config is kept as-is, since it's the module's business.
    """

    path: str
    backend: ThreescaleBackend
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Any, what: str = "auth_config") -> "ThreescaleAuth":
        if not isinstance(d, dict):
            raise ConfigParseFailure(f"{what}: must be a mapping, not {type(d).__name__}")

        path = _require(d, "path", str, what)
        wasm_config = _require(d, "wasm_config", dict, what)
        backend = ThreescaleBackend.from_dict(_require(wasm_config, "backend", dict, what), what)
        extra = {k: v for k, v in wasm_config.items() if k != "backend"}

        return cls(path=path, backend=backend, extra=extra)

    def wasm_config(self) -> Dict[str, Any]:
        return {**self.extra, "backend": self.backend.as_dict()}

    def as_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "wasm_config": self.wasm_config()}


# The capability providers. A Service has zero or more of these, always in the same
# order (identity first, then billing), and each one contributes exactly one HTTP filter
# ahead of the metering filter, plus whatever clusters it needs.


@dataclass(frozen=True)
class OIDCProvider:
    issuer: str

    name = "oidc"


@dataclass(frozen=True)
class ThreescaleProvider:
    auth: ThreescaleAuth

    name = "threescale"


AuthProvider = Union[OIDCProvider, ThreescaleProvider]


@dataclass(frozen=True)
class Service:
    id: int
    hosts: List[str]
    target_domain: str
    policies: List[PolicyConfig] = field(default_factory=list)
    proxy_rules: List[MappingRule] = field(default_factory=list)
    oidc_issuer: Optional[str] = None
    auth_config: Optional[ThreescaleAuth] = None

    def providers(self) -> List[AuthProvider]:
        providers: List[AuthProvider] = []

        if self.oidc_issuer:
            providers.append(OIDCProvider(self.oidc_issuer))

        if self.auth_config is not None:
            providers.append(ThreescaleProvider(self.auth_config))

        return providers

    @property
    def cluster_name(self) -> str:
        return f"Cluster::service::{self.id}"

    @property
    def vm_name(self) -> str:
        return f"Service::{self.id}"

    @classmethod
    def from_dict(cls, d: Any) -> "Service":
        if not isinstance(d, dict):
            raise ConfigParseFailure(f"service: must be a mapping, not {type(d).__name__}")

        svc_id = _require(d, "id", int, "service")

        if svc_id < 0:
            raise ConfigParseFailure(f"service: id {svc_id} must not be negative")

        what = f"service {svc_id}"

        policies = [
            PolicyConfig.from_dict(p, what=f"{what} policy {i}")
            for i, p in enumerate(_optional(d, "policies", list, what, []))
        ]

        rules = [
            MappingRule.from_dict(r, what=f"{what} rule {i}")
            for i, r in enumerate(_optional(d, "proxy_rules", list, what, []))
        ]

        auth_config = None

        if d.get("auth_config", None) is not None:
            auth_config = ThreescaleAuth.from_dict(d["auth_config"], what=f"{what} auth_config")

        return cls(
            id=svc_id,
            hosts=_string_list(d, "hosts", what, required=True),
            target_domain=_require(d, "target_domain", str, what),
            policies=policies,
            proxy_rules=rules,
            oidc_issuer=_optional(d, "oidc_issuer", str, what, None),
            auth_config=auth_config,
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "hosts": list(self.hosts),
            "policies": [p.as_dict() for p in self.policies],
            "target_domain": self.target_domain,
            "proxy_rules": [r.as_dict() for r in self.proxy_rules],
            "oidc_issuer": self.oidc_issuer,
            "auth_config": self.auth_config.as_dict() if self.auth_config else None,
        }

    def as_json(self, pretty=False) -> str:
        return dump_json(self.as_dict(), pretty=pretty)


def load_services(serialization: str) -> List[Service]:
    """
    Load Services from YAML or JSON text. Each document can hold a single service,
    a list of services, or a mapping with a "services" list.
    """

    try:
        documents = parse_yaml(serialization)
    except yaml.YAMLError as e:
        raise ConfigParseFailure(f"could not parse services: {e}") from e

    services: List[Service] = []

    for doc in documents:
        if doc is None:
            continue

        if isinstance(doc, dict) and ("services" in doc):
            doc = doc["services"]

        if isinstance(doc, list):
            services.extend(Service.from_dict(x) for x in doc)
        else:
            services.append(Service.from_dict(doc))

    return services
