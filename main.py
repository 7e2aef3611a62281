from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from dotenv import load_dotenv
import logging
import os

from database.connection import engine, Base
import models  # noqa: F401  registers tables on Base
from routes import feed, images, notes, session
from utils.context import create_context
from utils.errors import StorageError, UploadError
from utils.storage import MOUNT_PATH

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(
    title="Secret Board API",
    description="API for an anonymous bulletin board of secret notes",
    version="1.0.0"
)

# Change feed, image store and paging settings shared by all routes
app.state.context = create_context()
app.state.context.images.ensure_root()

# CORS configuration - Restrict to specific origins
allowed_origins = [
    "http://localhost:8080",           # Local development frontend
    "http://localhost:5173",           # Alternative local dev port
]

extra_origins = os.getenv("ALLOWED_ORIGINS")
if extra_origins:
    allowed_origins.extend(origin.strip() for origin in extra_origins.split(",") if origin.strip())

# In development, allow localhost with any port
LOCALHOST_ORIGIN_REGEX = r"http://localhost(:\d+)?"
origin_regex = LOCALHOST_ORIGIN_REGEX if os.getenv("ENVIRONMENT") == "development" else None

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_origin_regex=origin_regex,
    allow_credentials=True,  # Session cookie travels with requests
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(UploadError)
async def upload_error_handler(request: Request, exc: UploadError):
    return JSONResponse(status_code=502, content={"detail": str(exc)})


# Include routers (no /api prefix - routes are at root level)
app.include_router(feed.router, tags=["Changes"])
app.include_router(notes.router, tags=["Notes"])
app.include_router(images.router, tags=["Images"])
app.include_router(session.router, tags=["Session"])

# Uploaded images are publicly readable
app.mount(MOUNT_PATH, StaticFiles(directory=str(app.state.context.images.root)), name="uploads")


@app.get("/")
def root():
    """Root endpoint"""
    return {"message": "Secret Board API", "version": "1.0.0"}


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", 8000))
    uvicorn.run("main:app", host=host, port=port, reload=True)
