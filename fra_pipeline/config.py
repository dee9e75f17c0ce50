# fra_pipeline/config.py
"""
Runtime configuration for the FRA Atlas pipeline.

Loads .env once; every value can be overridden with an environment variable.
"""

import os
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

# ---- Logging ---------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# ---- HTTP ------------------------------------------------------------------
CORS_ORIGINS: List[str] = [
    o.strip()
    for o in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173",
    ).split(",")
    if o.strip()
]
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))

# Uploaded PDFs are written here before OCR
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", "uploads"))

# ---- OCR -------------------------------------------------------------------
# Example: "eng+hin" for English + Hindi (install the Tesseract language packs first)
TESS_LANG = os.getenv("TESS_LANG", "eng")
PDF_DPI = int(os.getenv("PDF_DPI", "300"))
# Only needed when Poppler is not on PATH (Windows)
POPPLER_PATH: Optional[str] = os.getenv("POPPLER_PATH") or None

# ---- NER -------------------------------------------------------------------
SPACY_MODEL = os.getenv("SPACY_MODEL", "en_core_web_sm")

# India bounding box (lat_min, lon_min, lat_max, lon_max)
INDIA_BBOX: Tuple[float, float, float, float] = (6.0, 68.0, 37.5, 97.5)
