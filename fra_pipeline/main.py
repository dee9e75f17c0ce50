# fra_pipeline/main.py
"""
FastAPI entrypoint for the FRA Atlas pipeline.

Notes:
- Configuration (.env) is loaded once by fra_pipeline.config
- One in-memory RecordStore per process, held on app.state.pipeline
- Atlas routes live under /api/fra-atlas
"""
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fra_pipeline.config import CORS_ORIGINS, HOST, LOG_LEVEL, PORT, UPLOAD_DIR
from fra_pipeline.db import RecordStore
from fra_pipeline.routes.atlas import router as atlas_router
from fra_pipeline.services.pipeline import AtlasPipeline

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ----------------------------------------------------------------------
# App
# ----------------------------------------------------------------------
app = FastAPI(title="FRA Atlas Pipeline API")
app.state.pipeline = AtlasPipeline(RecordStore())

app.include_router(atlas_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

UPLOAD_DIR.mkdir(parents=True, exist_ok=True)


@app.get("/health")
def health():
    return {"status": "ok", "service": "FRA Atlas Pipeline"}


def run():
    logger.info("Starting FRA Atlas pipeline on %s:%s", HOST, PORT)
    uvicorn.run("fra_pipeline.main:app", host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
