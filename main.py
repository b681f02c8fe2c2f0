import os
import random
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool
from pymongo.errors import PyMongoError

from database import (
    CollectionProvider,
    close_client,
    get_collection,
    get_collection_provider,
)
from portfolio import (
    add_project,
    check_health,
    get_portfolio,
    increment_visitor_count,
    init_profile,
    update_profile,
)
from schemas import (
    AddProjectResponse,
    ProfileUpdate,
    ProjectCreate,
    UpdateProfileResponse,
    VisitorCount,
)

logger = logging.getLogger(__name__)

# =============
# Configuration
# =============
PUBLIC_DIR = os.getenv("PUBLIC_DIR", os.path.join(os.path.dirname(__file__), "public"))
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        # Server selection can wait several seconds when the store is down
        await run_in_threadpool(lambda: init_profile(get_collection()))
    except PyMongoError:
        logger.exception("Could not initialize profile document")
    yield
    close_client()


# ==================
# FastAPI app config
# ==================
app = FastAPI(title="Portfolio API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ======
# Routes
# ======
@app.get("/", include_in_schema=False)
def root():
    return FileResponse(os.path.join(PUBLIC_DIR, "index.html"))

# Demo endpoints, nothing is persisted
@app.get("/api/data")
def sample_data():
    return {
        "message": "Hello from the portfolio server!",
        "timestamp": _timestamp(),
        "visitorCount": random.randint(1, 1000),
        "serverStatus": "Running smoothly",
    }

@app.get("/api/update")
def sample_update(name: Optional[str] = None, title: Optional[str] = None):
    return {
        "success": True,
        "message": "Profile updated successfully!",
        "updatedData": {
            "name": name or "Updated Name",
            "title": title or "Updated Title",
            "updatedAt": _timestamp(),
        },
    }

# Profile
@app.get("/api/portfolio")
def fetch_portfolio(collection_for: CollectionProvider = Depends(get_collection_provider)):
    try:
        doc = get_portfolio(collection_for())
    except PyMongoError:
        logger.exception("Failed to fetch portfolio")
        raise HTTPException(status_code=500, detail="Internal server error")
    if doc is None:
        raise HTTPException(status_code=404, detail="Portfolio not found")
    return doc

@app.post("/api/update-profile", response_model=UpdateProfileResponse)
def post_update_profile(data: ProfileUpdate, collection_for: CollectionProvider = Depends(get_collection_provider)):
    fields = data.model_dump(exclude_unset=True, exclude_none=True)
    try:
        updated_at = update_profile(collection_for(), fields)
    except PyMongoError:
        logger.exception("Failed to update profile")
        raise HTTPException(status_code=500, detail="Internal server error")
    if updated_at is None:
        raise HTTPException(status_code=404, detail="Profile not found or no changes made")
    return UpdateProfileResponse(message="Profile updated successfully!", updatedAt=updated_at)

# Projects
@app.post("/api/projects", response_model=AddProjectResponse)
def post_project(data: ProjectCreate, collection_for: CollectionProvider = Depends(get_collection_provider)):
    try:
        project = add_project(collection_for(), data.name, data.description)
    except PyMongoError:
        logger.exception("Failed to add project")
        raise HTTPException(status_code=500, detail="Internal server error")
    return AddProjectResponse(message="Project added successfully!", project=project)

# Visitors
@app.get("/api/visitor-count", response_model=VisitorCount)
def visitor_count(collection_for: CollectionProvider = Depends(get_collection_provider)):
    try:
        count = increment_visitor_count(collection_for())
    except PyMongoError:
        # The page keeps rendering with a placeholder count
        logger.exception("Failed to update visitor count")
        count = 1
    return VisitorCount(visitorCount=count)

# Health
@app.get("/api/health")
def health(collection_for: CollectionProvider = Depends(get_collection_provider)):
    try:
        check_health(collection_for())
    except PyMongoError as e:
        logger.error("Health check failed: %s", e)
        return JSONResponse(
            status_code=500,
            content={
                "status": "Error",
                "database": "Disconnected",
                "error": str(e),
                "timestamp": _timestamp(),
            },
        )
    return {"status": "OK", "database": "Connected", "timestamp": _timestamp()}


# Anything else under / is looked up in the public directory
app.mount("/", StaticFiles(directory=PUBLIC_DIR, check_dir=False), name="public")


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL)
    logger.info("Server running at http://localhost:%d", PORT)
    logger.info("Try visiting: http://localhost:%d/api/portfolio", PORT)
    uvicorn.run(app, host=HOST, port=PORT)
