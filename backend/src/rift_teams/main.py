"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rift_teams.config import settings
from rift_teams.api.routes.team_maker import router as team_maker_router
from rift_teams.repositories.participant_repository import DuckDBParticipantRepository


# Database path - use settings or default to data/rift_teams.duckdb in repo root
def get_database_path() -> Path:
    """Get the database path from settings or default location."""
    repo_root = Path(__file__).parent.parent.parent.parent
    if settings.database_path:
        db_path = Path(settings.database_path)
        if db_path.is_absolute():
            return db_path
        # Relative path - resolve from repo root
        return repo_root / settings.database_path
    return repo_root / "data" / "rift_teams.duckdb"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup: open the repository once per process unless a test injected one
    owns_repository = not hasattr(app.state, "repository")
    if owns_repository:
        app.state.repository = DuckDBParticipantRepository(get_database_path())
    yield
    # Shutdown: close the repository we opened
    if owns_repository:
        app.state.repository.close()


app = FastAPI(
    title="Rift Teams",
    description="Custom-game team maker - balanced 5v5 teams with role preferences",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "rift-teams"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Rift Teams API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(team_maker_router)
