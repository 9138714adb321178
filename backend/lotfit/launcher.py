"""LotFit launcher — starts the API server on a free local port."""

from __future__ import annotations

import socket

import uvicorn

from lotfit.config import settings


def find_free_port() -> int:
    """Find a free TCP port to avoid conflicts."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def main() -> None:
    port = find_free_port()
    print(f"Starting LotFit on http://127.0.0.1:{port}/docs")
    print("Press Ctrl+C to stop.\n")

    uvicorn.run(
        "lotfit.main:app",
        host="127.0.0.1",
        port=port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
