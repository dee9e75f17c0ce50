# fra_pipeline/ner.py
import logging
from functools import lru_cache
from typing import Dict, List, Optional

import spacy

from fra_pipeline.config import SPACY_MODEL
from fra_pipeline.models import RawDocument

logger = logging.getLogger(__name__)

# spaCy label -> RawDocument.ner category
LABEL_CATEGORIES = {
    "PERSON": "persons",
    "GPE": "locations",
    "LOC": "locations",
    "DATE": "dates",
    "CARDINAL": "numbers",
    "QUANTITY": "numbers",
    "ORG": "organizations",
}
CATEGORIES = ("persons", "locations", "dates", "numbers", "organizations")


@lru_cache(maxsize=1)
def get_nlp():
    # Loaded on first use so importing the package does not require the model
    logger.info("Loading spaCy model %s", SPACY_MODEL)
    return spacy.load(SPACY_MODEL)


def _dedupe(seq):
    """Dedupe while preserving order and dropping falsy values."""
    seen = set()
    out = []
    for x in seq:
        if not x:
            continue
        if x not in seen:
            seen.add(x)
            out.append(x)
    return out


def _clean(s: Optional[str]) -> Optional[str]:
    if not s:
        return None
    return " ".join(s.split())


def extract_entities(text: str) -> Dict[str, List[str]]:
    """
    Group spaCy entities into the five categories the field extractor reads
    ordinally (persons[0] is the applicant, persons[1] the father, ...).
    Order of first appearance is kept.
    """
    doc = get_nlp()(text or "")
    buckets: Dict[str, List[str]] = {c: [] for c in CATEGORIES}
    for ent in doc.ents:
        category = LABEL_CATEGORIES.get(ent.label_)
        if category:
            buckets[category].append(_clean(ent.text))
    return {c: _dedupe(values) for c, values in buckets.items()}


def build_raw_document(text: str, confidence: Optional[float] = None) -> RawDocument:
    return RawDocument(
        extracted_text=text or "",
        ner=extract_entities(text) if text else {c: [] for c in CATEGORIES},
        confidence=confidence,
    )
