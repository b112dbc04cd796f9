# -------------------------------------------------------------
# AI Trip Planner: FastAPI Entrypoint
# -------------------------------------------------------------
import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trip_planner.api.planner_router import router as planner_router
from trip_planner.config import settings
from trip_planner.db.mongo import init_mongo
from trip_planner.errors import TripPlannerError

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# -------------------------------------------------------------
# Initialize FastAPI App
# -------------------------------------------------------------
app = FastAPI(
    title="AI Trip Planner",
    description="Turns a trip description into an AI-generated itinerary",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

app.include_router(planner_router)


# Errors raised while building dependencies never reach the router's handler
@app.exception_handler(TripPlannerError)
async def trip_planner_error_handler(request: Request, exc: TripPlannerError):
    logger.error("%s: %s", type(exc).__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


# -------------------------------------------------------------
# Health Check
# -------------------------------------------------------------
@app.get("/health")
def health():
    return {"status": "ok"}


# -------------------------------------------------------------
# Startup Hook
# -------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    # Held on app.state; the loop only keeps weak references to tasks
    app.state.init_task = asyncio.create_task(initialize_services())


async def initialize_services():
    logger.info("Environment: %s", settings.ENV)
    try:
        await init_mongo()
    except Exception as e:
        # Requests still get a lazy handle; log and keep serving
        logger.error("MongoDB initialization failed: %s", e)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
