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
# Resource encoding: turning the dicts we build into canonical bytes, wrapping payloads
# as typed_config Anys, and building a plain upstream cluster from a name and an address.
########

import ipaddress
import urllib.parse
from typing import Any, Dict, Optional, Tuple

import orjson

import tollgate.envoy.proto.config.cluster.v3 as clusterv3
import tollgate.envoy.proto.wkt as wkt

UPSTREAM_TLS_TYPE = "type.googleapis.com/envoy.extensions.transport_sockets.tls.v3.UpstreamTlsContext"

DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
}


def encode(message: Any) -> bytes:
    """
    Serialize a message to its canonical wire form: JSON with sorted keys, so that
    the same message always encodes to the same bytes. Non-string keys (which YAML
    happily produces) become strings. Raises orjson.JSONEncodeError (a TypeError)
    for anything that still isn't JSON-serializable.
    """

    return orjson.dumps(message, option=orjson.OPT_NON_STR_KEYS | orjson.OPT_SORT_KEYS)


def typed_config(type_url: str, message: Dict[str, Any]) -> Dict[str, Any]:
    return {"@type": type_url, **message}


def string_value(value: str) -> wkt.StringValue:
    return {"@type": wkt.STRING_VALUE_TYPE, "value": value}


def duration(seconds: float) -> wkt.Duration:
    if float(seconds).is_integer():
        return "%ds" % seconds

    return "%0.3fs" % seconds


def split_address(address: str) -> Tuple[Optional[str], str, int]:
    """
    Split an upstream address into (scheme, host, port). We accept "host",
    "host:port", and "scheme://host[:port][/path]"; without a port we use the
    scheme's default, or 80 if there's no scheme at all.

    Raises ValueError if there's no usable host or port.
    """

    if not address or address != address.strip():
        raise ValueError(f"malformed address {address!r}")

    if "://" in address:
        parsed = urllib.parse.urlparse(address)
        scheme: Optional[str] = parsed.scheme.lower()
    else:
        parsed = urllib.parse.urlparse("//" + address)
        scheme = None

    host = parsed.hostname

    if not host:
        raise ValueError(f"malformed address {address!r}: no host")

    # Note that urlparse raises ValueError for an out-of-range port.
    port = parsed.port

    if port is None:
        if scheme is None:
            port = DEFAULT_PORTS["http"]
        elif scheme in DEFAULT_PORTS:
            port = DEFAULT_PORTS[scheme]
        else:
            raise ValueError(f"malformed address {address!r}: no port for scheme {scheme}")

    return scheme, host, port


def is_ip_address(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
        return True
    except ValueError:
        return False


def build_cluster(name: str, address: str, connect_timeout_ms: int = 5000) -> clusterv3.Cluster:
    """
    Build an upstream cluster with a single endpoint at address. Host names get
    LOGICAL_DNS resolution, IP literals are STATIC. HTTPS targets (or anything on 443
    without a scheme) originate TLS.
    """

    scheme, host, port = split_address(address)

    ctype: clusterv3.DiscoveryType = "STATIC" if is_ip_address(host) else "LOGICAL_DNS"

    cluster: clusterv3.Cluster = {
        "name": name,
        "type": ctype,
        "connect_timeout": "%0.3fs" % (float(connect_timeout_ms) / 1000.0),
        "lb_policy": "ROUND_ROBIN",
        "dns_lookup_family": "V4_ONLY",
        "load_assignment": {
            "cluster_name": name,
            "endpoints": [
                {
                    "lb_endpoints": [
                        {
                            "endpoint": {
                                "address": {
                                    "socket_address": {
                                        "address": host,
                                        "port_value": port,
                                        # Yes, really. Envoy uses the transport socket to decide whether
                                        # to originate TLS.
                                        "protocol": "TCP",
                                    }
                                }
                            }
                        }
                    ]
                }
            ],
        },
    }

    if (scheme == "https") or ((scheme is None) and (port == 443)):
        tls: Dict[str, Any] = {}

        if ctype != "STATIC":
            tls["sni"] = host

        cluster["transport_socket"] = {
            "name": "envoy.transport_sockets.tls",
            "typed_config": typed_config(UPSTREAM_TLS_TYPE, tls),
        }

    return cluster
