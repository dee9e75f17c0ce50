"""
FRA Atlas pipeline

Turns OCR/NER output of Forest Rights Act claim documents into canonical
claim records, welfare-scheme eligibility and GeoJSON atlas entries.
"""

__version__ = "1.0.0"
