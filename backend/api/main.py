# api/main.py

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.deps import get_settings
from api.routers.auth import router as auth_router
from api.routers.health import router as health_router

logger = logging.getLogger("api.access")


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=str(settings.log_level or "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="SIWE Auth Service",
        version="1.0.0",
    )

    origins = list(settings.cors_allow_origins or [])
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response

    app.include_router(health_router)
    app.include_router(auth_router)

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(app, host=settings.server_host, port=settings.server_port, log_level=str(settings.log_level or "INFO").lower())


if __name__ == "__main__":
    run()
