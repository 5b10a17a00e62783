from contextlib import asynccontextmanager
import logging

from decouple import config, Csv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.database import engine, Base, SessionLocal
from app.services.exceptions import NotFoundError, ConstraintViolationError, ValidationError
from app.services.user_service import UserService
from app.auth.routes import router as auth_router
from app.dashboard.routes import router as dashboard_router
from app.clients.routes import router as clients_router
from app.cases.routes import router as cases_router
from app.sessions.routes import router as sessions_router
from app.documents.routes import router as documents_router
from app.invoices.routes import router as invoices_router
from app.tasks.routes import router as tasks_router
from app.users.routes import router as users_router
from app.activity.routes import router as activity_router
from app.export.routes import router as export_router

logging.basicConfig(
    level=config("LOG_LEVEL", default="INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = SessionLocal()
    try:
        UserService(db).ensure_admin(
            username=config("ADMIN_USERNAME", default="admin"),
            password=config("ADMIN_PASSWORD", default="admin123"),
            name=config("ADMIN_NAME", default="Administrator")
        )
    finally:
        db.close()
    yield


app = FastAPI(
    title="Law Office Management API",
    description="Clients, cases, court sessions, documents, invoices and tasks for a law office",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config("CORS_ORIGINS", default="http://localhost:3000,http://localhost:8080", cast=Csv()),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(ConstraintViolationError)
async def constraint_violation_handler(request: Request, exc: ConstraintViolationError):
    return JSONResponse(status_code=409, content={"detail": exc.message, "details": exc.details})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed input as 400 without echoing the submitted values."""
    errors = [
        {"loc": err.get("loc"), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": "Invalid request", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include routers
app.include_router(auth_router)
app.include_router(dashboard_router)
app.include_router(clients_router)
app.include_router(cases_router)
app.include_router(sessions_router)
app.include_router(documents_router)
app.include_router(invoices_router)
app.include_router(tasks_router)
app.include_router(users_router)
app.include_router(activity_router)
app.include_router(export_router)


@app.get("/")
def root():
    return {
        "message": "Law Office Management API",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}
