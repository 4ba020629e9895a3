"""Demo HTTP server for resterr.

Serves a tiny Starlette application wrapped in ErrorHandlingMiddleware so
the translation layer can be exercised by hand:

    resterr-demo --port 8000
    curl -i localhost:8000/items/42      # 404, mapped sentinel
    curl -i localhost:8000/teapot        # 418, RESTError raised directly
    curl -i localhost:8000/boom          # 500, unmapped error
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from .config import DispatcherConfig
from .errors import RESTError, wrap
from .errors.handlers import ErrorDispatcher
from .sinks import ErrorHandlingMiddleware
from .utils import configure_logging

logger = logging.getLogger(__name__)

ERR_NOT_FOUND = LookupError("item not found")
ERR_FORBIDDEN = PermissionError("item is private")

ERROR_TABLE = {
    ERR_NOT_FOUND: (404, "resource missing"),
    ERR_FORBIDDEN: (403, "access denied"),
}

ITEMS = {"1": {"id": "1", "name": "kettle"}}
PRIVATE_ITEMS = {"7"}


async def get_item(request: Request) -> JSONResponse:
    item_id = request.path_params["item_id"]
    if item_id in PRIVATE_ITEMS:
        raise wrap(f"reading item {item_id}", ERR_FORBIDDEN)
    if item_id not in ITEMS:
        raise wrap(f"lookup of item {item_id} failed", ERR_NOT_FOUND)
    return JSONResponse(ITEMS[item_id])


async def teapot(request: Request) -> JSONResponse:
    raise RESTError(418, "short and stout")


async def boom(request: Request) -> JSONResponse:
    raise RuntimeError("unexpected failure")


async def not_found(request: Request) -> JSONResponse:
    raise wrap(f"no route for {request.url.path}", ERR_NOT_FOUND)


routes = [
    Route("/items/{item_id}", get_item),
    Route("/teapot", teapot),
    Route("/boom", boom),
    Route("/{path:path}", not_found),
]


def create_app(config: Optional[DispatcherConfig] = None) -> Starlette:
    """Build the demo app with a dispatcher configured from ``config``."""
    config = config or DispatcherConfig()
    app = Starlette(routes=routes)
    app.add_middleware(
        ErrorHandlingMiddleware,
        dispatcher=ErrorDispatcher.from_config(ERROR_TABLE, config),
    )
    return app


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the demo server."""
    parser = argparse.ArgumentParser(description="resterr demo HTTP server")
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to listen on (default: 8000)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="localhost",
        help="Host to bind to (default: localhost)",
    )
    args = parser.parse_args(argv)

    try:
        config = DispatcherConfig.from_env()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(config.log_level, config.log_json)

    logger.info("Serving resterr demo", extra={"host": args.host, "port": args.port})
    uvicorn.run(create_app(config), host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
