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

import hashlib
import logging
from typing import IO, Any, Optional, Union

import orjson
import yaml

logger = logging.getLogger("tollgate.utils")

# XXX There doesn't seem to be a way to convince mypy that SafeLoader and CSafeLoader
# share a base class, even though they do.

yaml_loader: Any = yaml.SafeLoader
yaml_dumper: Any = yaml.SafeDumper

try:
    yaml_loader = yaml.CSafeLoader
except AttributeError:
    pass

try:
    yaml_dumper = yaml.CSafeDumper
except AttributeError:
    pass


def parse_yaml(serialization: str) -> Any:
    return list(yaml.load_all(serialization, Loader=yaml_loader))


def dump_yaml(obj: Any, **kwargs) -> str:
    return yaml.dump(obj, Dumper=yaml_dumper, **kwargs)


def parse_json(serialization: Union[str, bytes]) -> Any:
    return orjson.loads(serialization)


def dump_json(obj: Any, pretty=False) -> str:
    if pretty:
        return bytes.decode(
            orjson.dumps(
                obj, option=orjson.OPT_NON_STR_KEYS | orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
            )
        )
    else:
        return bytes.decode(orjson.dumps(obj, option=orjson.OPT_NON_STR_KEYS))


TRUTHY = frozenset(["y", "yes", "t", "true", "on", "1"])


def parse_bool(s: Optional[Union[str, bool]]) -> bool:
    """
    Parse a boolean value from a string. T, True, Y, y, 1 return True;
    other things return False.
    """

    # If `s` is already a bool, return its value.
    if isinstance(s, bool):
        return s

    # If we didn't get anything at all, return False.
    if not s:
        return False

    # OK, we got _something_. Anything not on the truthy list is False.
    return s.strip().lower() in TRUTHY


# Content hashing for the WASM modules we hand to Envoy. Envoy checks the SHA-256 of whatever
# it fetches against what we put in the RemoteDataSource, so this has to be computed over
# exactly the bytes the control plane serves.

HASH_CHUNK_SIZE = 65536


def sha256_digest(stream: IO[bytes]) -> bytes:
    h = hashlib.sha256()

    while True:
        chunk = stream.read(HASH_CHUNK_SIZE)

        if not chunk:
            break

        h.update(chunk)

    return h.digest()


def file_sha256(path: str) -> str:
    """
    Return the lowercase hex SHA-256 of the file at path. Raises OSError if the
    file can't be opened or read.
    """

    with open(path, "rb") as stream:
        digest = sha256_digest(stream)

    logger.debug("sha256 %s: %s", path, digest.hex())

    return digest.hex()
