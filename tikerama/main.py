# tikerama/main.py
import requests
from fastapi import FastAPI, Request
from pydantic import ValidationError
from fastapi.responses import JSONResponse
import uvicorn

from tikerama.api.routers import admin, auth, carts, events, health, orders, payments, tickets
from tikerama.services.api_client import ApiError
from tikerama.utils.logging import get_logger

logger = get_logger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Tikerama Storefront",
        version="1.0.0",
    )

    @app.exception_handler(ApiError)
    def api_error_handler(request: Request, exc: ApiError):
        # backend refusals are shown to the buyer as they are
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(requests.RequestException)
    def upstream_unreachable_handler(request: Request, exc: requests.RequestException):
        logger.error(f"Backend unreachable on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=502,
            content={"detail": "Service momentanément indisponible, veuillez réessayer."},
        )

    @app.exception_handler(ValidationError)
    def malformed_backend_answer_handler(request: Request, exc: ValidationError):
        # request bodies are validated by FastAPI itself, this is an upstream payload
        logger.error(f"Unexpected backend payload on {request.url.path}: {exc}")
        return JSONResponse(status_code=502, content={"detail": "Réponse inattendue du service."})

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(events.router)
    app.include_router(carts.router)
    app.include_router(payments.router)
    app.include_router(orders.router)
    app.include_router(tickets.router)
    app.include_router(admin.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8080)
