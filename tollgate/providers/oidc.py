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
# OIDC identity discovery: given an issuer, fetch its provider metadata and build the
# jwt_authn config that validates its tokens, plus the cluster Envoy needs to reach
# the issuer's JWKS endpoint.
########

import logging
from typing import Any, Dict, Optional, Tuple

import requests

import tollgate.envoy.proto.config.cluster.v3 as clusterv3
import tollgate.envoy.proto.extensions.filters.http.jwt_authn.v3 as jwtv3

from ..config import Settings
from ..envoy.encoder import build_cluster, duration, split_address

logger = logging.getLogger("tollgate.oidc")

WELL_KNOWN_PATH = "/.well-known/openid-configuration"

JWKS_CACHE_DURATION = 300


class OIDCDiscovery:
    def __init__(self, issuer: str, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self.issuer = issuer
        self.settings = settings
        self.session = session or requests.Session()
        self.metadata: Optional[Dict[str, Any]] = None

    @property
    def discovery_url(self) -> str:
        return self.issuer.rstrip("/") + WELL_KNOWN_PATH

    def fetch(self) -> Dict[str, Any]:
        """
        Fetch (once) and sanity-check the issuer's provider metadata. Raises
        requests.RequestException for transport trouble and ValueError for
        metadata we can't use.
        """

        if self.metadata is not None:
            return self.metadata

        url = self.discovery_url
        logger.debug("fetching OIDC metadata from %s", url)

        with self.session.get(url, timeout=self.settings.oidc_timeout) as r:
            r.raise_for_status()
            metadata = r.json()

        if not isinstance(metadata, dict):
            raise ValueError(f"{url}: provider metadata is not a JSON object")

        # OpenID Connect Discovery says the issuer in the metadata MUST be identical to the
        # one we asked for. We let a trailing slash slide.
        issuer = metadata.get("issuer", None)

        if not isinstance(issuer, str) or (issuer.rstrip("/") != self.issuer.rstrip("/")):
            raise ValueError(f"{url}: issuer mismatch, expected {self.issuer}, got {issuer}")

        if not isinstance(metadata.get("jwks_uri", None), str):
            raise ValueError(f"{url}: provider metadata has no jwks_uri")

        self.metadata = metadata
        return metadata

    def cluster_name(self, jwks_uri: str) -> str:
        # Named for the JWKS endpoint rather than any one service, so that every service
        # using the same provider shares (and overwrites) the same cluster.
        _, host, port = split_address(jwks_uri)
        return f"oidc::{host}:{port}"

    def export(self, service_id: int) -> Tuple[jwtv3.JwtAuthentication, clusterv3.Cluster]:
        metadata = self.fetch()
        jwks_uri = metadata["jwks_uri"]

        cluster_name = self.cluster_name(jwks_uri)
        cluster = build_cluster(cluster_name, jwks_uri, self.settings.connect_timeout_ms)

        provider_name = f"service_{service_id}_oidc"

        provider: jwtv3.JwtProvider = {
            "issuer": metadata["issuer"],
            "remote_jwks": {
                "http_uri": {
                    "uri": jwks_uri,
                    "cluster": cluster_name,
                    "timeout": duration(self.settings.oidc_timeout),
                },
                "cache_duration": duration(JWKS_CACHE_DURATION),
            },
            "forward": True,
        }

        jwt_authn: jwtv3.JwtAuthentication = {
            "providers": {provider_name: provider},
            "rules": [{"match": {"prefix": "/"}, "requires": {"provider_name": provider_name}}],
        }

        logger.info("service %d: OIDC issuer %s, JWKS via %s", service_id, self.issuer, cluster_name)

        return jwt_authn, cluster


def discover(
    issuer: str, service_id: int, settings: Settings, session: Optional[requests.Session] = None
) -> Tuple[jwtv3.JwtAuthentication, clusterv3.Cluster]:
    return OIDCDiscovery(issuer, settings, session=session).export(service_id)
