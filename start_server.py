#!/usr/bin/env python3
"""Start script that handles the PORT environment variable and launches uvicorn.

Proxy headers are only trusted when FORWARDED_ALLOW_IPS names the proxy
addresses (e.g. "10.0.0.1" or "*" behind a platform load balancer).
"""

import os
import sys
import subprocess
from typing import Mapping


def resolve_port(env: Mapping[str, str]) -> int:
    port = env.get("PORT", "8000")
    try:
        return int(port)
    except ValueError:
        print(f"Warning: Invalid PORT value '{port}', using default 8000", file=sys.stderr)
        return 8000


def build_uvicorn_command(env: Mapping[str, str]) -> list[str]:
    cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        "delivery_engine.main:app",
        "--host",
        env.get("HOST", "0.0.0.0"),
        "--port",
        str(resolve_port(env)),
    ]
    forwarded_allow_ips = env.get("FORWARDED_ALLOW_IPS", "").strip()
    if forwarded_allow_ips:
        cmd += ["--proxy-headers", "--forwarded-allow-ips", forwarded_allow_ips]
    return cmd


def main() -> int:
    # uvicorn imports ``delivery_engine.main`` from the src directory
    pythonpath = os.environ.get("PYTHONPATH", "")
    src_path = os.path.abspath("src")
    if not os.path.isdir(src_path):
        print(f"Warning: src directory not found at {src_path}", file=sys.stderr)
        src_path = os.getcwd()
    os.environ["PYTHONPATH"] = f"{src_path}:{pythonpath}" if pythonpath else src_path

    cmd = build_uvicorn_command(os.environ)
    print(f"Starting server: {' '.join(cmd[1:])}", file=sys.stderr)
    try:
        result = subprocess.call(cmd)
    except KeyboardInterrupt:
        print("Server interrupted by user", file=sys.stderr)
        return 0
    if result != 0:
        print(f"Uvicorn exited with code {result}", file=sys.stderr)
    return result


if __name__ == "__main__":
    sys.exit(main())
