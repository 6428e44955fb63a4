from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .logging_setup import setup_logging
from .routers import tasks as tasks_router
from .settings import get_settings
from .tracker import TaskTracker, get_tracker

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "tasks",
        "description": "Task operations, view controls, delete confirmation and edit-in-place.",
    },
]

_settings = get_settings()
setup_logging(_settings.log_level)

app = FastAPI(
    title="Task Tracker",
    description="Single-user task tracker: priorities, due dates, filtering, search and a dashboard.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_allow_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Wrap malformed payloads (unknown priority, bad dueDate, unknown filter) in one error envelope."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check(tracker: TaskTracker = Depends(get_tracker)):
    """Report liveness and which storage provider the tracker writes to."""
    return {"message": "Healthy", "backend": tracker.storage_name}


app.include_router(tasks_router.router)
