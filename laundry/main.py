import logging

from fastapi import FastAPI

from laundry.api.admin import router as admin_router
from laundry.api.auth import router as auth_router
from laundry.api.customer import router as customer_router
from laundry.core.dependencies import get_log_level, get_session_manager

# Configure logging
logging.basicConfig(
    level=get_log_level(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Laundry Shop",
    version="0.1.0",
    description="Order, payment and reporting API for a laundry shop backed by a JSON key-value store.",
)


@app.on_event("startup")
async def startup_event() -> None:
    """
    Seed the store on first run and restore the persisted session.
    """
    sessions = get_session_manager()
    user = sessions.current_user
    if user is not None:
        logger.info(f"Restored session for '{user.username}'")


@app.get("/health")
async def health() -> dict:
    """
    Lightweight health check endpoint.
    """
    return {"status": "ok"}


app.include_router(auth_router, tags=["auth"])
app.include_router(customer_router, prefix="/customer", tags=["customer"])
app.include_router(admin_router, prefix="/admin", tags=["admin"])


if __name__ == "__main__":
    """
    Allow running `python -m laundry.main` to start the Uvicorn development server.
    """
    import uvicorn

    uvicorn.run(
        "laundry.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
