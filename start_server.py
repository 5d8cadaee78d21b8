#!/usr/bin/env python3
"""Launch the route planner API with uvicorn, honouring the PORT variable set by hosting platforms."""

import os
import sys

import uvicorn

from src.route_planner.config import settings


def resolve_port(raw: str | None) -> int:
    if not raw:
        return settings.server_port
    try:
        port = int(raw)
    except ValueError:
        print(f"Warning: Invalid PORT value '{raw}', using {settings.server_port}", file=sys.stderr)
        return settings.server_port
    if not 0 < port < 65536:
        print(f"Warning: PORT {port} out of range, using {settings.server_port}", file=sys.stderr)
        return settings.server_port
    return port


def main() -> None:
    port = resolve_port(os.environ.get("PORT"))
    print(f"Starting {settings.app_name} on {settings.server_host}:{port}", file=sys.stderr)
    uvicorn.run(
        "src.route_planner.main:app",
        host=settings.server_host,
        port=port,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    main()
