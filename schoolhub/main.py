import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.cors import CORSMiddleware

from schoolhub.api import auth_api, user_api, ticket_api, lesson_api, grade_api, attendance_api, admin_api
from schoolhub.configs import settings
from schoolhub.configs.database import init_db
from schoolhub.configs.storage import upload_dir

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database schema ready")
    yield

app = FastAPI(title="SchoolHub API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _readable(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form"))
    message = error.get("msg", "Invalid request")
    # drop pydantic's "Value error, " prefix from custom validators
    message = message.removeprefix("Value error, ")
    if error.get("type") == "missing":
        return f"Missing field: {location}" if location else "Missing fields"
    return f"{location}: {message}" if location else message


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = _readable(errors[0]) if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail, "errors": [_readable(e) for e in errors]},
    )


@app.exception_handler(SQLAlchemyError)
async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Store error on {request.method} {request.url.path}")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": "Server error"})


# Include routers
app.include_router(auth_api.router)
app.include_router(user_api.teacher_router)
app.include_router(user_api.student_router)
app.include_router(ticket_api.router)
app.include_router(lesson_api.router)
app.include_router(grade_api.router)
app.include_router(attendance_api.router)
app.include_router(admin_api.router)

app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=upload_dir()), name="uploads")


@app.get("/")
def root():
    return {"message": "SchoolHub API"}


if __name__ == '__main__':
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
