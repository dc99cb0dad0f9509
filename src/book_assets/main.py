"""FastAPI application entry point."""

from fastapi import FastAPI

from .config import AppConfig, load_config
from .dependencies import include_routers
from .logging import configure_logging
from .storage.object_store import ObjectStoreClient


def create_app(
    config: AppConfig | None = None,
    store: ObjectStoreClient | None = None,
) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    configure_logging()
    cfg = config or load_config()
    app = FastAPI(title="Book Asset Pipeline")
    include_routers(app, cfg, store=store)
    return app


if __name__ == "__main__":  # pragma: no cover - manual launch
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
