"""
Run the service (default) or the gateway with uvicorn:
  python -m dockmaster
  python -m dockmaster --gateway
"""
import argparse
import sys

import uvicorn
from dotenv import load_dotenv

from dockmaster.core.config import get_settings


def main() -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Run the Dockmaster API.")
    parser.add_argument("--gateway", action="store_true", help="Run the split-service API gateway")
    parser.add_argument("--host", default=None, help="Bind address (default: HOST)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: PORT)")
    args = parser.parse_args()

    settings = get_settings()
    uvicorn.run(
        "dockmaster.gateway:create_gateway_app" if args.gateway else "dockmaster.main:app",
        factory=args.gateway,
        host=args.host or settings.HOST,
        port=args.port or settings.PORT,
        log_level=settings.LOG_LEVEL,
        timeout_graceful_shutdown=settings.SHUTDOWN_TIMEOUT_SEC,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
