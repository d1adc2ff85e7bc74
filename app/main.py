import logging

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from app.api.routes import APP_NAME, APP_VERSION, router
from app.config import settings_from_env

app = FastAPI(title=APP_NAME, version=APP_VERSION)
app.include_router(router)
# Configure logging
logging.basicConfig(level=settings_from_env().log_level)
logger = logging.getLogger(__name__)


@app.get("/")
async def _root() -> RedirectResponse:
    return RedirectResponse(url="/info")
