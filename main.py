from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.config import settings
from app.core.database import init_db
from app.core.logging import configure_logging
from app.endpoints import auth, user, training_program, program_assignment, training_session, session_enrollment, stats, admin, employee
from app.middleware.exceptions import (
    database_exception_handler,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.middleware.logging import RequestLoggingMiddleware

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, database_exception_handler)

api = settings.API_PREFIX
app.include_router(auth.router, prefix=f"{api}/auth", tags=["Auth"])
app.include_router(user.router, prefix=f"{api}/users", tags=["Users"])
app.include_router(training_program.router, prefix=f"{api}/training-programs", tags=["Training Programs"])
app.include_router(program_assignment.router, prefix=f"{api}/programs", tags=["Program Assignments"])
app.include_router(training_session.router, prefix=f"{api}/sessions", tags=["Sessions"])
app.include_router(session_enrollment.router, prefix=f"{api}/enrollments", tags=["Enrollments"])
app.include_router(stats.router, prefix=f"{api}/stats", tags=["Stats"])
app.include_router(admin.router, prefix=f"{api}/admin", tags=["Admin"])
app.include_router(employee.router, prefix=f"{api}/employee", tags=["Employee"])


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "ok", "service": settings.PROJECT_NAME, "version": settings.VERSION}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
