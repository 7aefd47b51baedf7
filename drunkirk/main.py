from fastapi import FastAPI
import logging

from drunkirk.api.deps import create_controller, get_controller, has_controller, set_controller
from drunkirk.api.routes import router
from drunkirk.assets.startup import init_catalog_for_app
from drunkirk.config import settings_from_env
from drunkirk.infra.redis_client import create_redis

settings = settings_from_env()

app = FastAPI(title="drunkirk", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    catalog = init_catalog_for_app()
    if not has_controller():
        set_controller(create_controller(r=create_redis(settings.redis_url), catalog=catalog, settings=settings))

    # Hydrate before the first request is served so saved settings never race user actions.
    state = get_controller().hydrate()
    logger.info("engine ready: %d built-in challenges, %d players", len(catalog), len(state.players))


@app.on_event("shutdown")
async def _shutdown() -> None:
    if has_controller():
        get_controller().close()


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "drunkirk", "version": "0.1.0"}
