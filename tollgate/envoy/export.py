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
# export.py -- compile one Service into the Envoy resources that carry it
#
# The output of an export is an ordered list of keyed resources:
#
#   service::id::<id>::cluster      the service's own upstream cluster (always first)
#   <provider cluster names>        one per capability provider, in provider order
#   service::id::<id>::listener     the listener with the full HTTP filter chain (always last)
#
# Export is all-or-nothing: any failure raises an ExportError for the service, and no
# resources are returned at all.
########

import contextlib
import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Literal, Optional, Tuple, Type

import tollgate.envoy.proto.config.cluster.v3 as clusterv3
import tollgate.envoy.proto.config.listener.v3 as listenerv3
import tollgate.envoy.proto.extensions.filters.http.jwt_authn.v3 as jwtv3
import tollgate.envoy.proto.extensions.filters.network.http_connection_manager.v3 as hcmv3

from ..config import Settings
from ..errors import AdapterFailure, EncodingFailure, ExportError
from ..providers import oidc, threescale
from ..service import OIDCProvider, Service, ThreescaleProvider
from .cluster import service_cluster
from .encoder import encode
from .httpfilter import ProviderHTTPFilter, compose_http_filters
from .listener import service_listener
from .wasm import metering_plugin

# IdentityDiscovery takes an issuer URL and a service ID, and returns the jwt_authn config
# for that issuer plus the cluster that reaches it.
IdentityDiscovery = Callable[[str, int], Tuple[jwtv3.JwtAuthentication, clusterv3.Cluster]]

ResourceKind = Literal["cluster", "listener"]


@dataclass(frozen=True)
class EnvoyResource:
    kind: ResourceKind
    resource: Dict[str, Any]

    @classmethod
    def cluster(cls, cluster: clusterv3.Cluster) -> "EnvoyResource":
        return cls("cluster", dict(cluster))

    @classmethod
    def listener(cls, listener: listenerv3.Listener) -> "EnvoyResource":
        return cls("listener", dict(listener))


@dataclass(frozen=True)
class EnvoyExport:
    key: str
    config: EnvoyResource

    def encoded(self) -> bytes:
        return encode(self.config.resource)

    def as_dict(self) -> Dict[str, Any]:
        return {"key": self.key, self.config.kind: self.config.resource}


def cluster_key(service: Service) -> str:
    return f"service::id::{service.id}::cluster"


def listener_key(service: Service) -> str:
    return f"service::id::{service.id}::listener"


@dataclass
class ProviderContribution:
    clusters: List[clusterv3.Cluster]
    http_filter: hcmv3.HttpFilter


class Bundle:
    """
    The resources for one export, in order, with unique keys.
    """

    def __init__(self, service: Service) -> None:
        self.service = service
        self.exports: List[EnvoyExport] = []
        self.keys: Dict[str, EnvoyExport] = {}

    def add(self, key: str, config: EnvoyResource) -> None:
        if key in self.keys:
            error = EncodingFailure(self.service.id, f"duplicate resource key {key}")
            logging.getLogger("tollgate.export").error("%s", error)
            raise error

        export = EnvoyExport(key=key, config=config)
        self.keys[key] = export
        self.exports.append(export)


class Exporter:
    """
    Exporter compiles Services into EnvoyExports. It holds no per-service state, so one
    Exporter can be shared by any number of exports, including concurrent ones.
    """

    def __init__(
        self, settings: Optional[Settings] = None, discovery: Optional[IdentityDiscovery] = None
    ) -> None:
        self.settings = settings or Settings.from_env()

        if discovery is None:
            discovery = functools.partial(oidc.discover, settings=self.settings)

        self.discovery: IdentityDiscovery = discovery
        self.logger = logging.getLogger("tollgate.export")

    @contextlib.contextmanager
    def stage(
        self,
        service: Service,
        what: str,
        failure: Type[ExportError] = EncodingFailure,
        adapter: Optional[str] = None,
    ) -> Iterator[None]:
        """
        Run one stage of an export, turning anything it raises into an ExportError for
        service, and logging it. ExportErrors raised inside the stage have already been
        reported, so they pass through untouched.
        """

        try:
            yield
        except ExportError:
            raise
        except Exception as e:
            if adapter:
                error: ExportError = AdapterFailure(service.id, adapter, f"{what}: {e}")
            else:
                error = failure(service.id, f"{what}: {e}")

            self.logger.error("%s", error)
            raise error from e

    def export(self, service: Service) -> List[EnvoyExport]:
        self.logger.debug("service %d: exporting", service.id)

        bundle = Bundle(service)

        with self.stage(service, "failed to export cluster"):
            cluster = service_cluster(service, self.settings)

        bundle.add(cluster_key(service), EnvoyResource.cluster(cluster))

        provider_filters: List[hcmv3.HttpFilter] = []

        for provider in service.providers():
            contribution = contribute(provider, self, service)

            for provider_cluster in contribution.clusters:
                bundle.add(provider_cluster["name"], EnvoyResource.cluster(provider_cluster))

            provider_filters.append(contribution.http_filter)

        with self.stage(service, "failed to build metering filter"):
            metering = metering_plugin(service, self.settings)

        with self.stage(service, "failed to export listener"):
            http_filters = compose_http_filters(provider_filters, metering)
            listener = service_listener(service, http_filters, self.settings)

        bundle.add(listener_key(service), EnvoyResource.listener(listener))

        # Make sure everything will actually serialize before we let any of it go.
        with self.stage(service, "failed to encode resources"):
            for e in bundle.exports:
                e.encoded()

        self.logger.info("service %d: exported %s", service.id, ", ".join(e.key for e in bundle.exports))

        return bundle.exports

    def export_all(self, services: Iterable[Service]) -> Dict[str, EnvoyExport]:
        """
        Export many Services into one keyed set of resources. Auxiliary clusters shared
        between services (the same OIDC provider, say) collapse into one entry, last
        writer wins. Any failure aborts the whole thing.
        """

        seen = set()
        result: Dict[str, EnvoyExport] = {}

        for service in services:
            if service.id in seen:
                error = ExportError(service.id, "duplicate service id")
                self.logger.error("%s", error)
                raise error

            seen.add(service.id)

            for e in self.export(service):
                result[e.key] = e

        return result


@functools.singledispatch
def contribute(provider: Any, exporter: Exporter, service: Service) -> ProviderContribution:
    raise TypeError(f"unknown capability provider {type(provider).__name__}")


@contribute.register
def contribute_oidc(provider: OIDCProvider, exporter: Exporter, service: Service) -> ProviderContribution:
    with exporter.stage(service, f"OIDC discovery for {provider.issuer} failed", adapter=provider.name):
        jwt_authn, cluster = exporter.discovery(provider.issuer, service.id)
        http_filter = ProviderHTTPFilter(provider, jwt_authn)

    return ProviderContribution(clusters=[cluster], http_filter=http_filter)


@contribute.register
def contribute_threescale(
    provider: ThreescaleProvider, exporter: Exporter, service: Service
) -> ProviderContribution:
    # No backend cluster, no export: a 3scale service is never exported unmetered.
    with exporter.stage(service, "3scale backend failed", adapter=provider.name):
        cluster = threescale.cluster(provider.auth, exporter.settings)
        plugin = threescale.build_plugin(provider.auth, service.id, exporter.settings)
        http_filter = ProviderHTTPFilter(provider, plugin)

    return ProviderContribution(clusters=[cluster], http_filter=http_filter)


def export(
    service: Service, settings: Optional[Settings] = None, discovery: Optional[IdentityDiscovery] = None
) -> List[EnvoyExport]:
    return Exporter(settings=settings, discovery=discovery).export(service)


def export_all(
    services: Iterable[Service],
    settings: Optional[Settings] = None,
    discovery: Optional[IdentityDiscovery] = None,
) -> Dict[str, EnvoyExport]:
    return Exporter(settings=settings, discovery=discovery).export_all(services)

