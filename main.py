from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.health import router as health_router
from api.loans import router as loans_router
from config import settings
from database import AsyncSessionLocal, dispose_engine, init_db
from exceptions import LoanServiceError
from logger import logger
from schemas import ApiResponse
from services.seed import seed_demo_loans


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    if settings.seed_demo_data:
        async with AsyncSessionLocal() as session:
            await seed_demo_loans(session)
            await session.commit()
    logger.info("%s %s starting (%s)", settings.app_name, settings.app_version, settings.environment)
    try:
        yield
    finally:
        logger.info("%s shutdown", settings.app_name)
        await dispose_engine()


def _format_validation_error(err: dict) -> str:
    # drop the "body"/"query" location prefix
    loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
    field = ".".join(loc)
    return f"{field}: {err.get('msg')}" if field else str(err.get("msg"))


async def loan_service_error_handler(request: Request, exc: LoanServiceError):
    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse.fail(exc.message, exc.errors),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [_format_validation_error(e) for e in exc.errors()]
    return JSONResponse(status_code=400, content=ApiResponse.fail("Validation failed", errors))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=ApiResponse.fail("An unexpected error occurred", [str(exc)]),
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description="Loan application tracking API",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # wildcard origins cannot be combined with credentials
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LoanServiceError, loan_service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(loans_router)
    app.include_router(health_router)
    return app


app = create_app()
