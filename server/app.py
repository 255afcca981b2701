"""FastAPI application serving the funnel editor core."""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from funnelkit.adapters.storage import SqliteStore
from funnelkit.codec import FUNNEL_VERSION
from funnelkit.config import FUNNEL_DB_PATH, configure_logging
from funnelkit.session import FunnelSession
from server.funnel_routes import router as funnel_router

# CORS origins - configurable via environment variable
# Use comma-separated values for multiple origins, or "*" for all (development only)
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open host storage and restore the stored funnel on startup."""
    configure_logging()
    session = FunnelSession(SqliteStore(FUNNEL_DB_PATH))
    session.restore_or_start()
    app.state.session = session
    yield


app = FastAPI(
    title="Funnel Builder API",
    description="API server for editing, validating and persisting sales funnels",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# include routes
app.include_router(funnel_router, prefix="/api")


@app.get("/")
def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": "0.1.0",
        "document_version": FUNNEL_VERSION,
        "funnel_db": str(FUNNEL_DB_PATH),
        "endpoints": {
            "funnel": "/api/funnel",
            "templates": "/api/node-templates",
            "export": "/api/funnel/export",
            "import": "/api/funnel/import",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
