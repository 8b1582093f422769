"""
Booking Ledger — FastAPI Application.

Entry point: configures logging and registers all routers.
"""

from fastapi import FastAPI

from booking_ledger.config import configure_logging, get_settings
from booking_ledger.api.accounts import router as accounts_router
from booking_ledger.api.belege import router as belege_router
from booking_ledger.api.bookings import router as bookings_router
from booking_ledger.api.health import router as health_router
from booking_ledger.api.ledger import router as ledger_router

settings = get_settings()
configure_logging(settings)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Multi-tenant double-entry booking journal (SKR03)",
)

# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(belege_router)
app.include_router(bookings_router)
app.include_router(ledger_router)
