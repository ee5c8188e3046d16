"""
Main application file for the Contributor Board API.

This file initializes the FastAPI application, sets up logging,
registers global exception handlers, and includes API routers.
It also defines a root endpoint for basic API information.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from contributor_board.api.routes import board_routes
from contributor_board.core.exceptions import ContributorBoardError
from contributor_board.core.logger import setup_logging, get_logger
from contributor_board.core.config import config_manager

# --- Logging Setup ---
try:
    setup_logging(config_manager)
    logger = get_logger(__name__)
    logger.info("Logging successfully initialized for FastAPI application.")
except Exception as e:
    # Fall back to basic logging so that a broken logging section is still visible.
    import logging as py_logging
    py_logging.basicConfig(level=py_logging.WARNING, format="%(asctime)s - %(levelname)s - CRITICAL - Failed to setup custom logging: %(message)s")
    py_logging.critical(f"Failed to initialize custom logging via ConfigurationManager: {e}", exc_info=True)
    logger = py_logging.getLogger(__name__)


# --- FastAPI Application Initialization ---
app = FastAPI(
    title="Contributor Board API",
    description="Turns a group's Top Contributors widget markup into an editable, shareable "
                "leaderboard image. Provides endpoints for parsing markup, rendering and exporting "
                "boards, and relaying remote images.",
    version="0.1.0"
)

# --- Global Exception Handlers ---

@app.exception_handler(ContributorBoardError)
async def contributor_board_exception_handler(request: Request, exc: ContributorBoardError):
    """
    Handles all custom exceptions derived from `ContributorBoardError` that a route did not map itself.

    Returns:
        JSONResponse: A standardized JSON error response with HTTP 500.
    """
    logger.error(
        f"ContributorBoardError caught: {exc.__class__.__name__} - {exc.message} "
        f"for request: {request.method} {request.url}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"An application error occurred: {exc.message}"},
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handles Pydantic's `RequestValidationError` for request body, path, or query parameters.
    Board payloads with ranks out of order or out of range end up here.

    Returns:
        JSONResponse: A JSON response detailing the validation failures, HTTP 422.
    """
    logger.warning(
        f"RequestValidationError caught for: {request.method} {request.url}. Errors: {exc.errors()}",
        exc_info=False
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        # jsonable form: pydantic error contexts may hold exception objects.
        content={"detail": "Request validation failed", "errors": [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
            for error in exc.errors()
        ]},
    )

@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """
    Catch-all so that the API always answers with JSON, even for unexpected server errors.
    """
    logger.critical(
        f"Generic unhandled exception caught: {exc.__class__.__name__} - {str(exc)} "
        f"for request: {request.method} {request.url}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected server error occurred. Please contact support if the issue persists."},
    )


# --- API Router Inclusion ---
app.include_router(
    board_routes.router,
    prefix="/api/v1/board",
    tags=["Contributor Board"]
)


# --- Root Endpoint ---
@app.get("/", tags=["General"], summary="API Root Endpoint")
async def read_root():
    """
    Provides basic information about the API.
    """
    return {
        "message": "Welcome to the Contributor Board API",
        "version": app.version,
        "documentation_url": app.docs_url,
        "redoc_url": app.redoc_url
    }

# --- Main Execution Block (for development) ---
if __name__ == "__main__":
    import uvicorn

    # APP_ENV selects the configuration file (development by default).
    logger.info("Starting Uvicorn server directly for local development/testing (not for production)...")
    uvicorn.run(app, host="0.0.0.0", port=8000)
