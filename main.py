import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskdesk.config import settings
from taskdesk.database import Base, engine
from taskdesk.routers import auth, setup, tasks, users
from taskdesk.utils.errors import register_error_handlers

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("taskdesk")

app = FastAPI(title="Task Desk API")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Route registration
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
app.include_router(setup.router, tags=["Setup"])


@app.on_event("startup")
def startup_event():
    """Create missing tables when the application starts"""
    logger.info("Starting Task Desk API...")
    Base.metadata.create_all(bind=engine)


# Root route
@app.get("/")
def read_root():
    return {"message": "Task Desk API"}


@app.get("/health")
def health():
    return {"status": "ok"}
