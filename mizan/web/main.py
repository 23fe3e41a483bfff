"""
Mizan Web API - FastAPI Backend

A REST API over the MorphologyEngine.

Usage:
    uvicorn mizan.web.main:create_app --factory --reload --port 8000
    mizan serve --port 8000

API Documentation:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

import logging
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import Config, setup_logging
from ..engine import MorphologyEngine
from .routes import router

logger = logging.getLogger(__name__)

DESCRIPTION = """
## Mizan (الميزان الصرفي) - Arabic Root and Scheme Morphology

### Features
- Classify triliteral roots (سالم، مهموز، مضعّف، مثال، أجوف، ناقص، لفيف)
- Derive words from schemes such as فَاعِل and مَفْعُول
- Decompose a word back into its root and scheme
- Bulk import of roots and `name|rule` schemes

### Quick Start
```python
import requests

response = requests.post(
    "http://localhost:8000/api/generate",
    json={"root": "قول", "scheme": "فَاعِل"}
)
print(response.json()["surface"])
# Output: قَائِل
```
"""


def create_app(engine: Optional[MorphologyEngine] = None) -> FastAPI:
    """Build the app around an engine (a default one when none is given)."""
    if engine is None:
        config = Config.from_env()
        setup_logging(config.log_level)
        from ..cli import build_engine
        engine = build_engine(config)

    app = FastAPI(
        title="Mizan - Arabic Morphology API",
        description=DESCRIPTION,
        version=__version__,
        license_info={"name": "MIT"},
    )
    app.state.engine = engine

    # Configure CORS for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5173",  # Vite dev server
            "http://localhost:3000",  # Alternative dev port
            "http://127.0.0.1:5173",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api", tags=["morphology"])

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Mizan Arabic Morphology API",
            "version": __version__,
            "docs": "/docs",
            "health": "/api/health",
            "endpoints": {
                "roots": "GET/POST /api/roots",
                "schemes": "GET/POST /api/schemes",
                "generate": "POST /api/generate",
                "decompose": "POST /api/decompose",
                "statistics": "GET /api/statistics",
            }
        }

    logger.info(f"Mizan API ready: {engine.roots.count()} roots, {engine.schemes.count()} schemes")
    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
