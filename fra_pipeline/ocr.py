# fra_pipeline/ocr.py
import logging
from typing import Optional, Tuple

import pdfplumber
import pytesseract
from pdf2image import convert_from_path
from PIL import Image, ImageFilter, ImageOps

from fra_pipeline.config import PDF_DPI, POPPLER_PATH, TESS_LANG

logger = logging.getLogger(__name__)


# ---- Helpers ---------------------------------------------------------------

def _preprocess_for_ocr(img: Image.Image) -> Image.Image:
    """
    Grayscale, autocontrast and a light unsharp mask; helps Tesseract on
    faint stamps and low-contrast photocopies of claim forms.
    """
    gray = ImageOps.grayscale(img)
    gray = ImageOps.autocontrast(gray, cutoff=1)
    return gray.filter(ImageFilter.UnsharpMask(radius=1.2, percent=150, threshold=3))


def _text_layer(file_path: str) -> str:
    pages = []
    with pdfplumber.open(file_path) as pdf:
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                pages.append(page_text)
    return "\n".join(pages)


def _ocr_page(img: Image.Image) -> Tuple[str, Optional[float]]:
    """Text and mean word confidence (0..1) for one rasterized page."""
    data = pytesseract.image_to_data(
        _preprocess_for_ocr(img), lang=TESS_LANG, output_type=pytesseract.Output.DICT
    )
    lines, confs = {}, []
    for i, word in enumerate(data["text"]):
        word = (word or "").strip()
        if not word:
            continue
        key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
        lines.setdefault(key, []).append(word)
        conf = float(data["conf"][i])
        if conf >= 0:
            confs.append(conf)
    text = "\n".join(" ".join(words) for words in lines.values())
    return text, (sum(confs) / len(confs) / 100 if confs else None)


# ---- Main API --------------------------------------------------------------

def extract_text(file_path: str) -> Tuple[str, Optional[float]]:
    """
    Extract text from an FRA claim PDF:
      1) pdfplumber text layer (selectable PDFs), confidence 1.0.
      2) If empty, rasterize with Poppler and OCR every page with Tesseract;
         confidence is the mean page confidence.
    Returns ("", None) when nothing could be read.
    """
    try:
        text = _text_layer(file_path)
    except Exception as e:
        logger.warning("pdfplumber failed for %s: %s", file_path, e)
        text = ""

    if text.strip():
        return text.strip(), 1.0

    logger.info("No text layer in %s, falling back to Tesseract (%s)", file_path, TESS_LANG)
    images = convert_from_path(file_path, dpi=PDF_DPI, poppler_path=POPPLER_PATH)

    texts, confs = [], []
    for img in images:
        page_text, page_conf = _ocr_page(img)
        if page_text:
            texts.append(page_text)
        if page_conf is not None:
            confs.append(page_conf)

    text = "\n".join(texts).strip()
    if not text:
        logger.warning("OCR produced no text for %s", file_path)
        return "", None
    return text, (sum(confs) / len(confs) if confs else None)
