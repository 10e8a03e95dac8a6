from fastapi import FastAPI
from contextlib import asynccontextmanager
import logging

from settings import Settings, get_settings
from core.game_manager import GameManager
from api import channels, webhook

logger = logging.getLogger(__name__)


def create_app(settings: Settings = None, chamber=None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Deadman's Tip ready (pass burn={settings.pass_burn_amount} wei, "
            f"grit bonus={settings.grit_bonus_amount} wei)"
        )
        yield
        # 遊戲只存在記憶體，關閉時進行中的遊戲會消失
        live = len(app.state.game_manager.registry)
        if live:
            logger.warning(f"Shutting down with {live} game(s) in progress")

    app = FastAPI(
        title="Deadman's Tip API",
        description="Game engine for the Deadman's Tip chat elimination game",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.game_manager = GameManager.from_settings(settings, chamber=chamber)

    # Include routers
    app.include_router(webhook.router)
    app.include_router(channels.router)

    @app.get("/")
    def root():
        return {"message": "Deadman's Tip API", "status": "ok"}

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
