from start_server import build_uvicorn_command, resolve_port


def test_proxy_headers_are_not_trusted_by_default():
    cmd = build_uvicorn_command({"PORT": "9000"})

    assert "--proxy-headers" not in cmd
    assert "--forwarded-allow-ips" not in cmd
    assert cmd[cmd.index("--port") + 1] == "9000"
    assert "delivery_engine.main:app" in cmd


def test_proxy_headers_trusted_only_for_configured_addresses():
    cmd = build_uvicorn_command({"FORWARDED_ALLOW_IPS": "10.0.0.1"})

    assert "--proxy-headers" in cmd
    assert cmd[cmd.index("--forwarded-allow-ips") + 1] == "10.0.0.1"


def test_invalid_port_falls_back_to_default():
    assert resolve_port({"PORT": "http"}) == 8000
    assert resolve_port({}) == 8000
