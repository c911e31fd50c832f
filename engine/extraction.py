"""
Extraction Module - Numbers from Pasted Markup, OCR Words and Manual Input

Turns raw user input into an ordered list of observations rounded to two
decimals. OCR words arrive already recognised, each with its bounding box;
they are put in reading order (top-to-bottom, left-to-right within a row)
before parsing.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


MIN_VALUE = 0.01
MAX_VALUE = 10000.0
ROW_TOLERANCE = 10  # pixels

_SPAN_PATTERN = re.compile(r"<span[^>]*>([^<]+)</span>")
_DECIMAL_PATTERN = re.compile(r"(\d+)\.(\d{1,2})")
_LEADING_NUMBER = re.compile(r"^\s*[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?")


@dataclass
class BoundingBox:
    x0: float
    y0: float
    x1: float
    y1: float


@dataclass
class OcrWord:
    """A recognised word and its position on the page."""
    text: str
    bbox: BoundingBox

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OcrWord":
        return cls(text=data["text"], bbox=BoundingBox(**data["bbox"]))


def _in_range(value: float) -> bool:
    return MIN_VALUE <= value <= MAX_VALUE


def _parse_leading_float(text: str) -> Optional[float]:
    """Numeric prefix of `text` ("2.5x" -> 2.5), or None."""
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    return float(match.group(0))


def extract_from_html(html: str) -> List[float]:
    """
    Numbers from the text of every <span> element, in document order.

    Values outside [0.01, 10000] are dropped; kept values are rounded to
    two decimals.
    """
    numbers: List[float] = []
    for text in _SPAN_PATTERN.findall(html):
        value = _parse_leading_float(text.strip())
        if value is not None and _in_range(value):
            numbers.append(round(value, 2))

    logger.info(f"Extracted {len(numbers)} numbers from HTML")
    return numbers


def parse_ocr_token(text: str) -> Optional[float]:
    """
    Parse a single OCR token.

    Tokens with a decimal part are read as-is. Otherwise the digits are read
    as an integer, and integers >= 100 are assumed to have lost their decimal
    point (112 -> 1.12, 162525 -> 1625.25).
    """
    if _DECIMAL_PATTERN.search(text):
        return _parse_leading_float(text)

    digits = re.sub(r"[^\d]", "", text)
    if not digits:
        return None

    number = int(digits)
    if number >= 100:
        return number / 100
    return float(number)


def _reading_order(a: OcrWord, b: OcrWord, row_tolerance: float) -> float:
    dy = a.bbox.y0 - b.bbox.y0
    if abs(dy) < row_tolerance:
        return a.bbox.x0 - b.bbox.x0
    return dy


def order_words(words: Iterable[OcrWord], row_tolerance: float = ROW_TOLERANCE) -> List[OcrWord]:
    """Sort words top-to-bottom, then left-to-right among words on the same row."""
    return sorted(words, key=cmp_to_key(lambda a, b: _reading_order(a, b, row_tolerance)))


def extract_from_words(words: Iterable[OcrWord], row_tolerance: float = ROW_TOLERANCE) -> List[float]:
    """Numbers from OCR words in reading order, range-filtered and rounded."""
    numbers: List[float] = []
    for word in order_words(words, row_tolerance):
        value = parse_ocr_token(word.text)
        if value is not None and _in_range(value):
            numbers.append(round(value, 2))

    logger.info(f"Extracted {len(numbers)} numbers from OCR words")
    return numbers


def normalize_manual(values: Iterable[Any]) -> List[float]:
    """Parse manually entered values, dropping anything non-numeric."""
    numbers: List[float] = []
    for raw in values:
        if isinstance(raw, bool):
            continue
        if isinstance(raw, (int, float)):
            value = float(raw)
        elif isinstance(raw, str):
            value = _parse_leading_float(raw)
        else:
            value = None
        if value is None or math.isnan(value) or math.isinf(value):
            continue
        numbers.append(round(value, 2))
    return numbers


def summarize(numbers: List[float]) -> Optional[Dict[str, float]]:
    """min / max / avg of extracted numbers, None when empty."""
    if not numbers:
        return None
    return {
        "min": min(numbers),
        "max": max(numbers),
        "avg": sum(numbers) / len(numbers),
    }
