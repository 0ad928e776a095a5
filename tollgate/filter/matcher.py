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
# The mapping-rule engine that runs inside the data plane. It gets the Service back from
# the metering filter's plugin configuration and, for every request, works out which
# metering counters that request should bump.
#
# Each worker owns its own engine. Within a worker, the active Service lives in a single
# guarded cell: imports replace it wholesale or not at all, and never wait for the guard.
########

import logging
import threading
from typing import Dict, Mapping, Optional, Tuple, Union

import orjson

from ..errors import ConfigBusy, ConfigParseFailure
from ..service import Service
from ..utils import dump_json, parse_json

NO_METRICS = "{}"


class MappingRuleEngine:
    def __init__(self, service: Optional[Service] = None) -> None:
        self.logger = logging.getLogger("tollgate.filter")
        self._lock = threading.Lock()
        self._service: Optional[Service] = service

        # Avoid building debug strings on the request path unless they'll be logged.
        self._log_debug = self.logger.isEnabledFor(logging.DEBUG)

    @property
    def service(self) -> Optional[Service]:
        with self._lock:
            return self._service

    def import_config(self, config: Union[str, bytes]) -> Service:
        """
        Parse config (a JSON-serialized Service) and make it the active configuration.

        Raises ConfigParseFailure if config isn't a valid Service, and ConfigBusy if
        someone else holds the configuration cell. Either way, the previous
        configuration stays active.
        """

        try:
            service = Service.from_dict(parse_json(config))
        except orjson.JSONDecodeError as e:
            self.logger.error("rejecting configuration: %s", e)
            raise ConfigParseFailure(f"configuration is not valid JSON: {e}") from e
        except ConfigParseFailure as e:
            self.logger.error("rejecting configuration: %s", e)
            raise

        if not self._lock.acquire(blocking=False):
            self.logger.error("rejecting configuration for service %d: configuration is busy", service.id)
            raise ConfigBusy(f"configuration is busy, service {service.id} not imported")

        try:
            self._service = service
        finally:
            self._lock.release()

        self.logger.info("imported service %d with %d mapping rules", service.id, len(service.proxy_rules))

        return service

    def match(self, method: str, path: str) -> Tuple[bool, str]:
        """
        Match a request against the active mapping rules, in order. Returns whether any
        rule matched, and the metric deltas as a JSON object.

        When several matching rules feed the same metric, the last one wins: deltas are
        not summed.
        """

        matched, metrics = self.match_metrics(method, path)

        return matched, (dump_json(metrics) if metrics else NO_METRICS)

    def match_metrics(self, method: str, path: str) -> Tuple[bool, Dict[str, int]]:
        service = self.service
        metrics: Dict[str, int] = {}

        if service is None:
            return False, metrics

        for rule in service.proxy_rules:
            if rule.matches(method, path):
                if self._log_debug:
                    self.logger.debug("%s %s matches %s", method, path, rule)

                metrics[rule.metric_system_name] = rule.delta

        return bool(metrics), metrics

    # Host-facing entry points. The host must never see an exception from these.

    def on_configure(self, plugin_configuration: bytes) -> bool:
        try:
            self.import_config(plugin_configuration)
        except (ConfigParseFailure, ConfigBusy):
            return False

        return True

    def on_request_headers(self, headers: Mapping[str, str]) -> Optional[Dict[str, int]]:
        """
        Match a request given its HTTP/2-style pseudo-headers. Returns the metric deltas,
        or None if no rule matched (or the request has no :method or :path).
        """

        method = headers.get(":method", None)
        path = headers.get(":path", None)

        if not method or not path:
            self.logger.warning("request without :method or :path, not metering it")
            return None

        # Rules match on the path alone.
        path = path.split("?", 1)[0]

        matched, metrics = self.match_metrics(method, path)

        return metrics if matched else None
