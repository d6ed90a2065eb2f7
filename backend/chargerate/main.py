import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chargerate.config import settings
from chargerate.errors import ConfigurationError, InvalidStateError, NotFoundError, ValidationError
from chargerate.routers import charge_rates, health, pay_rate_presets, quotes, rates, reference_data

logging.basicConfig(level=settings.log_level)

app = FastAPI(
    title="Apprentice Charge Rate API",
    description="Charge rates and quotes for apprentices placed with host employers",
    version="1.0.0",
)

# CORS: open, no auth in front of this service yet
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(404, exc)


@app.exception_handler(InvalidStateError)
async def invalid_state_handler(request: Request, exc: InvalidStateError):
    return _error(409, exc)


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError):
    return _error(400, exc)


@app.exception_handler(ConfigurationError)
async def configuration_handler(request: Request, exc: ConfigurationError):
    return _error(422, exc)


app.include_router(health.router)
app.include_router(rates.router)
app.include_router(charge_rates.router)
app.include_router(quotes.router)
app.include_router(reference_data.router)
app.include_router(pay_rate_presets.router)
