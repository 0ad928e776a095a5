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
# This is the tollgate CLI. It's mostly a debugging tool: the most useful thing to do with
# it is "tollgate export services.yaml" to see exactly what a set of Services compiles to.
########

import logging
import sys

import clize
from clize import Parameter

from tollgate import ConfigImportError, ExportError, MappingRuleEngine, Settings, Version, load_services
from tollgate.envoy import EnvoyResource, Exporter, static_clusters
from tollgate.utils import dump_json, parse_json

__version__ = Version

logging.basicConfig(
    level=logging.INFO,
    format="%%(asctime)s tollgate-cli %s %%(levelname)s: %%(message)s" % __version__,
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger("tollgate")


def version():
    """
    Show tollgate's version
    """

    print("tollgate %s" % __version__)


def _load(services_path: str):
    with open(services_path, "r", encoding="utf-8") as stream:
        return load_services(stream.read())


def export(services_path: Parameter.REQUIRED, *, pretty=False, bootstrap=False, debug=False):
    """
    Export Services as Envoy resources, and print them as JSON

    :param services_path: YAML or JSON file holding one or more Services
    :param pretty: If set, pretty-print the output
    :param bootstrap: If set, include the clusters every data plane needs (e.g. wasm_files)
    :param debug: If set, generate debugging output
    """

    settings = Settings.from_env()

    if debug or settings.debug:
        logger.setLevel(logging.DEBUG)

    try:
        services = _load(services_path)
    except (OSError, ConfigImportError) as e:
        logger.error("could not load %s: %s", services_path, e)
        sys.exit(1)

    try:
        exports = Exporter(settings=settings).export_all(services)
    except ExportError as e:
        logger.error("export failed: %s", e)
        sys.exit(1)

    resources = []

    if bootstrap:
        for cluster in static_clusters(settings):
            resources.append({"key": cluster["name"], "cluster": EnvoyResource.cluster(cluster).resource})

    resources.extend(e.as_dict() for e in exports.values())

    print(dump_json(resources, pretty=pretty))


def match(services_path: Parameter.REQUIRED, method: Parameter.REQUIRED, request_path: Parameter.REQUIRED, *,
          service_id: int = -1):
    """
    Run the data-plane mapping rules for one Service against a single request

    :param services_path: YAML or JSON file holding one or more Services
    :param method: the request's HTTP method
    :param request_path: the request's path
    :param service_id: which Service to use (default: the first one)
    """

    try:
        services = _load(services_path)
    except (OSError, ConfigImportError) as e:
        logger.error("could not load %s: %s", services_path, e)
        sys.exit(1)

    candidates = [s for s in services if (service_id < 0) or (s.id == service_id)]

    if not candidates:
        logger.error("no matching service in %s", services_path)
        sys.exit(1)

    # Go through the same JSON the metering filter would get.
    engine = MappingRuleEngine()
    engine.import_config(candidates[0].as_json())

    matched, metrics = engine.match(method, request_path)

    print(dump_json({"matched": matched, "metrics": parse_json(metrics)}))


def main():
    clize.run([export, match], alt=[version],
              description="""
              Compile Services into Envoy resources, or try out their mapping rules. Use

              tollgate command --help

              for more help, or

              tollgate --version

              to see tollgate's version.
              """)


if __name__ == "__main__":
    main()
