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
# tollgate's version. Release builds stamp a tollgate.version file (version on the first
# line, commit on the second) next to the package; anything else falls back to whatever
# version pip installed, with no commit.
########

import os
from importlib import metadata
from typing import Tuple

VERSION_FILE = os.path.join(os.path.dirname(__file__), "..", "tollgate.version")


def read_version(path: str = VERSION_FILE) -> Tuple[str, str]:
    # Nothing here logs: this runs at import time, before logging is configured.
    try:
        with open(path) as stream:
            lines = [line.strip() for line in stream.read().splitlines()]
    except FileNotFoundError:
        lines = []

    if lines and lines[0]:
        return lines[0], (lines[1] if (len(lines) > 1 and lines[1]) else "MISSING(COMMIT)")

    try:
        return metadata.version("tollgate"), "MISSING(COMMIT)"
    except metadata.PackageNotFoundError:
        return "MISSING(FILE)", "MISSING(COMMIT)"


Version, Commit = read_version()
