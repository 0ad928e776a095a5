# Copyright 2026 Datawire. All rights reserved.
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

import os

from setuptools import find_packages, setup

Version = "0.1.0"

here = os.path.dirname(os.path.abspath(__file__))

with open(os.path.join(here, "requirements.txt"), "r") as stream:
    requirements = [line.strip() for line in stream.read().split("\n") if line.strip()]

setup(
    name="tollgate",
    version=Version,
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=requirements,
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "tollgate=tollgate_cli.tollgate:main",
        ]
    },
    keywords=["envoy", "wasm", "api gateway", "control plane"],
    classifiers=[],
)
