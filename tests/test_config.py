from tollgate import Settings


def test_defaults():
    settings = Settings.from_env({})

    assert settings == Settings()
    assert settings.control_plane_url == "http://control-plane-main:5001"
    assert settings.wasm_filter_path == "static/filter.wasm"
    assert settings.wasm_fetch_timeout == 100
    assert settings.listener_port == 80


def test_overrides():
    settings = Settings.from_env(
        {
            "TOLLGATE_CONTROL_PLANE_URL": "http://cp:9000",
            "TOLLGATE_LISTENER_PORT": "8080",
            "TOLLGATE_OIDC_TIMEOUT": "2.5",
            "TOLLGATE_DEBUG": "yes",
            "UNRELATED": "ignored",
        }
    )

    assert settings.control_plane_url == "http://cp:9000"
    assert settings.listener_port == 8080
    assert settings.oidc_timeout == 2.5
    assert settings.debug is True


def test_bad_values_are_ignored():
    settings = Settings.from_env({"TOLLGATE_LISTENER_PORT": "eighty"})

    assert settings.listener_port == 80


def test_static_url():
    settings = Settings(control_plane_url="http://cp:9000/")

    assert settings.static_url("/static/filter.wasm") == "http://cp:9000/static/filter.wasm"
    assert settings.static_url("static/filter.wasm") == "http://cp:9000/static/filter.wasm"
