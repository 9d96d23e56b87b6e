# salon_backend/app/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI

from salon_backend import __version__
from salon_backend.modules.payroll.routes import (
    register_payroll_exception_handlers,
    router as payroll_router,
)

from .startup import configure_logging, run_startup_checks


@asynccontextmanager
async def lifespan(app: FastAPI):
    run_startup_checks()
    yield


def create_app(run_checks: bool = True) -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Salon Payroll Engine",
        description="Commission, tier and bonus payroll for salon staff",
        version=__version__,
        lifespan=lifespan if run_checks else None,
    )

    register_payroll_exception_handlers(app)
    app.include_router(payroll_router)

    @app.get("/", tags=["health"])
    def read_root():
        return {"status": "ok", "service": "salon-payroll-engine"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
