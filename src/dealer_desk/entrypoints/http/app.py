from fastapi import FastAPI

from dealer_desk.entrypoints.http.exception_handlers import register_exception_handlers
from dealer_desk.entrypoints.http.routes.deals import router as deals_router
from dealer_desk.entrypoints.http.routes.health import router as health_router
from dealer_desk.entrypoints.http.routes.lease import router as lease_router


def build_app() -> FastAPI:
    app = FastAPI(
        title="Dealer Desk API",
        description="""
        Dealership deal-desk API for penciling deals and quoting leases.

        ## Features
        - Pencil retail installment deals (trade-in ACV, amortized payment)
        - Move deals through pending → manager → approved → delivered
        - Track the stipulation checklist
        - Quote leases and compare terms

        ## Authentication
        Handled upstream; party ids are passed explicitly.

        ## Error Handling
        All errors return structured JSON responses with error codes.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        license_info={
            "name": "Proprietary",
        },
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(deals_router, prefix="/v1")
    app.include_router(lease_router, prefix="/v1")

    return app


app = build_app()
