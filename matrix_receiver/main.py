"""FastAPI application receiving Alertmanager webhooks and forwarding them to Matrix."""

import argparse
import logging
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, HTTPException, Request, Response, status
from pydantic import ValidationError

from matrix_receiver import __version__
from matrix_receiver.config import DEFAULT_CONFIG_PATH, Settings, load_settings
from matrix_receiver.exceptions import AuthError, ConfigError, RoomAccessError
from matrix_receiver.forwarder import Forwarder
from matrix_receiver.matrix import MatrixClient
from matrix_receiver.models import AlertBatch
from matrix_receiver.renderers import BaseRenderer, create_renderer
from matrix_receiver.session import ClientFactory, Session, establish

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BridgeContext:
    """Everything a request handler needs, built once at startup."""

    session: Session
    renderer: BaseRenderer
    forwarder: Forwarder


def create_app(settings: Settings, *, client_factory: ClientFactory = MatrixClient) -> FastAPI:
    """Build the application for the given settings.

    The Matrix session is established in the lifespan handler, so a failed
    login or room join aborts startup before any request is accepted.
    """
    renderer = create_renderer(settings.general.mode, settings.general.html_template)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        try:
            session = await establish(
                settings.homeserver,
                settings.user.id,
                settings.user.token.get_secret_value(),
                settings.matrix.room_id,
                client_factory=client_factory,
            )
        except (AuthError, RoomAccessError) as e:
            logger.critical(e.message)
            raise

        app.state.bridge = BridgeContext(session=session, renderer=renderer, forwarder=Forwarder())
        logger.info(f"Receiver started with {renderer.name} renderer, forwarding to {session.room_id}")

        yield

        await session.aclose()
        logger.info("Receiver stopped")

    app = FastAPI(
        title="Matrix Alertmanager Receiver",
        description="Forwards Alertmanager webhooks into a Matrix room",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.post(settings.http.path, status_code=status.HTTP_200_OK)
    async def receive_alerts(request: Request) -> Response:
        """Receive an Alertmanager webhook."""
        bridge: BridgeContext = request.app.state.bridge

        body = await request.body()
        try:
            batch = AlertBatch.model_validate_json(body)
        except ValidationError as e:
            logger.warning(f"Rejected malformed hook from {_remote_address(request)}: {e.error_count()} error(s)")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payload")

        logger.info(f"Received valid hook from {_remote_address(request)}")
        logger.debug(f"Hook status={batch.status}, alerts={len(batch.alerts)}")

        messages = bridge.renderer.render(batch)
        results = await bridge.forwarder.forward_all(bridge.session, messages)
        failed = results.count(False)
        if failed:
            logger.warning(f"{failed} of {len(results)} message(s) could not be forwarded")

        return Response(status_code=status.HTTP_200_OK)

    return app


def _remote_address(request: Request) -> str:
    if request.client is None:
        return "unknown"
    return f"{request.client.host}:{request.client.port}"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    # nio is chatty at INFO
    logging.getLogger("nio").setLevel(logging.WARNING)


def run(argv: list[str] | None = None) -> None:
    """Load configuration and serve the receiver with uvicorn."""
    parser = argparse.ArgumentParser(description="Forward Alertmanager webhooks to a Matrix room.")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to configuration file")
    args = parser.parse_args(argv)

    configure_logging("INFO")
    logger.info(f"Reading configuration from {args.config}")
    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        logger.critical(e.message)
        sys.exit(1)

    configure_logging(settings.log_level)
    app = create_app(settings)

    logger.info(f"Listening for HTTP requests (webhooks) on {settings.http.address}:{settings.http.port}{settings.http.path}")
    uvicorn.run(
        app,
        host=settings.http.address,
        port=settings.http.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
