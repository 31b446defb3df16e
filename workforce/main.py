# workforce/main.py
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from workforce.api.v1.api import api_router
from workforce.core.config import settings
from workforce.core.exceptions import TrackerError
from workforce.db.init_db import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield

app = FastAPI(title="Workforce Tracker API", lifespan=lifespan)

@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError):
    # declined operations are reported, never raised past the API boundary
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})

# Include the main router for all routes prefixed with /api/v1
app.include_router(api_router, prefix="/api/v1")

@app.get("/")
def read_root():
    return {"message": "Welcome to the Workforce Tracker API"}

if __name__ == "__main__":
    uvicorn.run("workforce.main:app", host="0.0.0.0", port=8000)
