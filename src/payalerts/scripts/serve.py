from __future__ import annotations

import argparse

import uvicorn

from payalerts.core.config import settings


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the payalerts webhook API")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes (local only)")
    args = parser.parse_args(argv)

    # logging은 create_app()에서 설정하므로 uvicorn 기본 설정은 끈다
    uvicorn.run(
        "payalerts.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
