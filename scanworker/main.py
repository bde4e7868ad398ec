from fastapi import FastAPI

from scanworker.api.scan_routes import router as scan_router
from scanworker.core.logging import setup_logging

VERSION = "0.3.0"

setup_logging()

tags_metadata = [
    {
        "name": "scan",
        "description": "Start vulnerability scans against a target URL with one or more "
        "containerized tools (nuclei, zap, nikto). Results are normalized and "
        "posted to the caller's callback URL.",
    },
    {
        "name": "health",
        "description": "Liveness probe for the container orchestrator.",
    },
]

app = FastAPI(
    title="Scan Worker",
    version=VERSION,
    description="Runs external security scanners and reports normalized findings via callback.",
    openapi_tags=tags_metadata,
)

app.include_router(scan_router)


@app.get("/health", tags=["health"], summary="Health check")
def health() -> dict:
    return {"status": "healthy", "version": VERSION}
