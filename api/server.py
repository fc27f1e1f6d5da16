from __future__ import annotations

import sys
from pathlib import Path
from fastapi import FastAPI

# Ensure root path for imports when running directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api.routes import router  # noqa: E402
from utils.logger import setup_logger  # noqa: E402

setup_logger()

app = FastAPI(title="BeltStock API", version="0.1.0")
app.include_router(router, prefix="/api")


@app.get("/")
def index():
    return {"message": "BeltStock API", "docs": "/docs"}

# To run: uvicorn api.server:app --reload
