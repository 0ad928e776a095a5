import logging
from pathlib import Path

import pytest

from tollgate import Settings
from tollgate.envoy.encoder import build_cluster

from utils import METERING_MODULE, THREESCALE_MODULE

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s test %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def pytest_configure(config):
    config.addinivalue_line("markers", "compilertest: exports Services into Envoy resources")


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    # The control plane serves static/ out of its working directory, so run there.
    static = tmp_path / "static"
    static.mkdir()
    (static / "filter.wasm").write_bytes(METERING_MODULE)
    (tmp_path / "threescale_wasm_auth.wasm").write_bytes(THREESCALE_MODULE)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def settings(workdir: Path) -> Settings:
    return Settings()


@pytest.fixture
def discovery():
    """
    Stand-in for OIDC discovery that never touches the network. It records the
    issuers it was asked about in .calls.
    """

    class FakeDiscovery:
        def __init__(self) -> None:
            self.calls = []

        def __call__(self, issuer: str, service_id: int):
            self.calls.append((issuer, service_id))

            provider_name = f"service_{service_id}_oidc"
            jwks_uri = issuer.rstrip("/") + "/certs"
            cluster = build_cluster("oidc::idp.example.com:443", jwks_uri)

            jwt_authn = {
                "providers": {
                    provider_name: {
                        "issuer": issuer,
                        "remote_jwks": {
                            "http_uri": {"uri": jwks_uri, "cluster": cluster["name"], "timeout": "5s"},
                            "cache_duration": "300s",
                        },
                        "forward": True,
                    }
                },
                "rules": [{"match": {"prefix": "/"}, "requires": {"provider_name": provider_name}}],
            }

            return jwt_authn, cluster

    return FakeDiscovery()
