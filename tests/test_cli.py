import pytest

from tollgate.utils import dump_json, parse_json
from tollgate_cli import tollgate as cli

from utils import service_dict


@pytest.fixture
def services_file(workdir):
    path = workdir / "services.json"
    path.write_text(dump_json([service_dict(), service_dict(id=43, hosts=["gadgets.example.com"])], pretty=True))
    return str(path)


def test_export(services_file, capsys):
    cli.export(services_file)

    resources = parse_json(capsys.readouterr().out)

    assert [r["key"] for r in resources] == [
        "service::id::42::cluster",
        "service::id::42::listener",
        "service::id::43::cluster",
        "service::id::43::listener",
    ]
    assert resources[0]["cluster"]["name"] == "Cluster::service::42"
    assert resources[1]["listener"]["name"] == "service 42"


def test_export_bootstrap(services_file, capsys):
    cli.export(services_file, bootstrap=True)

    resources = parse_json(capsys.readouterr().out)

    assert resources[0]["key"] == "wasm_files"
    assert resources[0]["cluster"]["load_assignment"]["endpoints"][0]["lb_endpoints"][0]["endpoint"]["address"][
        "socket_address"
    ] == {"address": "control-plane-main", "port_value": 5001, "protocol": "TCP"}


def test_export_failure_exits(workdir, services_file):
    (workdir / "static" / "filter.wasm").unlink()

    with pytest.raises(SystemExit) as excinfo:
        cli.export(services_file)

    assert excinfo.value.code == 1


def test_export_missing_file(workdir):
    with pytest.raises(SystemExit):
        cli.export(str(workdir / "nope.yaml"))


def test_match(services_file, capsys):
    cli.match(services_file, "POST", "/widgets")

    assert parse_json(capsys.readouterr().out) == {"matched": True, "metrics": {"creates": 5}}


def test_match_other_service(services_file, capsys):
    cli.match(services_file, "GET", "/nothing", service_id=43)

    assert parse_json(capsys.readouterr().out) == {"matched": False, "metrics": {}}
