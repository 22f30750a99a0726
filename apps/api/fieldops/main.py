import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fieldops.core.config import settings
from fieldops.core.rate_limit import InMemoryRateLimiter
from fieldops.routers.appointments import router as appointments_router
from fieldops.routers.availability import router as availability_router
from fieldops.routers.companies import router as companies_router
from fieldops.routers.invoices import router as invoices_router
from fieldops.routers.projects import router as projects_router
from fieldops.routers.time_logs import router as time_logs_router
from fieldops.routers.workers import router as workers_router
from fieldops.scheduling.errors import (
  DependencyCycleError,
  SchedulingValidationError,
  UnknownTaskError,
)

logging.basicConfig(
  level=getattr(logging, settings.log_level.upper(), logging.INFO),
  format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Field Ops Scheduling API")

# Comma-separated list, e.g.:
# CORS_ORIGINS="http://localhost:5173,https://fieldops.example.com"
allow_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]

# Safe fallback for local dev if env var not set
if not allow_origins:
  allow_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
  ]

app.add_middleware(
  CORSMiddleware,
  allow_origins=allow_origins,
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)

# One limiter per process, shared by every check-in request
app.state.check_in_limiter = InMemoryRateLimiter(
  max_requests=settings.check_in_rate_limit,
  window_seconds=settings.check_in_rate_window_seconds,
)


@app.exception_handler(SchedulingValidationError)
def scheduling_validation_handler(request: Request, exc: SchedulingValidationError):
  logger.warning(f"{request.method} {request.url.path}: {exc}")
  return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(DependencyCycleError)
@app.exception_handler(UnknownTaskError)
def dependency_graph_handler(request: Request, exc: Exception):
  logger.warning(f"{request.method} {request.url.path}: {exc}")
  return JSONResponse(status_code=409, content={"detail": str(exc)})


app.include_router(companies_router, prefix="/companies", tags=["companies"])
app.include_router(workers_router, prefix="/workers", tags=["workers"])
app.include_router(availability_router, prefix="/availability", tags=["availability"])
app.include_router(appointments_router, prefix="/appointments", tags=["appointments"])
app.include_router(projects_router, prefix="/projects", tags=["projects"])
app.include_router(time_logs_router, prefix="/time-logs", tags=["time-logs"])
app.include_router(invoices_router, prefix="/invoices", tags=["invoices"])

@app.get("/health")
def health():
  return {"status": "ok"}
