from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from elktest.config import Settings, load_settings
from elktest.handler import GenerateLimitExceeded, RequestHandler
from elktest.logs import configure_logging, uvicorn_level

router = APIRouter()


def get_handler(request: Request) -> RequestHandler:
    return request.app.state.handler


@router.get("/hello")
def hello(request: Request, name: str = Query("World")):
    return get_handler(request).greet(name)


@router.post("/process")
async def process(request: Request, data: Dict[str, Any] = Body(...)):
    return await get_handler(request).process(data)


@router.get("/simulate-error")
def simulate_error(request: Request, throw_exception: bool = Query(False, alias="throwException")):
    # SimulatedError is left to Starlette's server-error middleware (500)
    return get_handler(request).simulate_error(throw_exception)


@router.get("/generate-logs")
def generate_logs(request: Request, count: int = Query(10)):
    return get_handler(request).generate_logs(count)


@router.get("/health")
def health(request: Request):
    return get_handler(request).health()


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "error": "Validation error",
            "detail": exc.errors(),
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
    )


async def generate_limit_handler(request: Request, exc: GenerateLimitExceeded):
    return JSONResponse(
        status_code=422,
        content={"error": str(exc), "count": exc.count, "limit": exc.limit},
    )


def create_app(settings: Optional[Settings] = None, handler: Optional[RequestHandler] = None) -> FastAPI:
    """Build the app. An injected handler keeps its own generate-logs limit;
    settings.generate_logs_max only applies to the default handler.
    """
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(title="ELK Test Harness", version="1.0.0")
    app.state.settings = settings
    app.state.handler = handler or RequestHandler(generate_logs_max=settings.generate_logs_max)

    # CORS support (open to all so browser dashboards can drive traffic)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(GenerateLimitExceeded, generate_limit_handler)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app(load_settings())


if __name__ == "__main__":
    settings = app.state.settings
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        log_level=uvicorn_level(settings.log_level),
        reload=False,
    )
