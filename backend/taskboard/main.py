"""Main FastAPI application for the task board."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import load_config
from .routers import board_router
from .services.board import create_board_controller, set_board_controller
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    config = load_config()
    setup_logging()
    logger.info("Starting task board...")

    board = await create_board_controller(config)
    set_board_controller(board)

    logger.info(f"Server: {config.server.host}:{config.server.port}")
    logger.info(f"Lists: {board.get_list_ids()}")

    yield

    # Shutdown
    logger.info("Shutting down task board...")
    set_board_controller(None)
    await board.close()


app = FastAPI(
    title="Task Board",
    description="Local task board with drag-and-drop ticket ordering",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(board_router)


@app.get("/api/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "service": "taskboard"}


if __name__ == "__main__":
    import uvicorn

    config = load_config()
    uvicorn.run(
        "taskboard.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
    )
