from contextlib import asynccontextmanager

from fastapi import FastAPI

from storygraph.config import configure_logging, settings
from storygraph.modules.story.router import router as story_router


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    configure_logging()
    yield


app = FastAPI(title=settings.app_name, lifespan=_lifespan)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(story_router)
