from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from contextlib import asynccontextmanager, suppress
from sqlmodel import Session
import asyncio
import logging
from wingo.db.base import init_db, engine
from wingo.api.routes import router
from wingo.config import settings, configure_logging
from wingo.services import PredictionService

logger = logging.getLogger(__name__)


def _cycle(svc: PredictionService):
    with Session(engine) as session:
        svc.learning_cycle(session)


async def learning_loop(svc: PredictionService, interval: float):
    while True:
        await asyncio.sleep(interval)
        try:
            await run_in_threadpool(_cycle, svc)
        except Exception:
            logger.exception("learning cycle failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level, settings.log_dir)
    init_db()
    svc: PredictionService = app.state.service
    with Session(engine) as session:
        svc.restore(session)
    await run_in_threadpool(_cycle, svc)
    task = asyncio.create_task(learning_loop(svc, settings.learning_interval))
    logger.info("learning loop started (every %.0fs)", settings.learning_interval)
    yield
    task.cancel()
    with suppress(asyncio.CancelledError):
        await task


def create_app(service: PredictionService | None = None) -> FastAPI:
    app = FastAPI(title="WinGo Ensemble Forecaster", lifespan=lifespan)
    app.state.service = service or PredictionService()
    app.include_router(router)

    @app.get("/")
    def home():
        svc = app.state.service
        return {"ok": True, "app": "WinGo Ensemble Forecaster", "buffer_size": len(svc.ctx.buffer)}

    return app


app = create_app()
