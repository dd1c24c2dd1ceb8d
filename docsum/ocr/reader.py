"""OCR reader built on top of pytesseract, pandas and OpenCV.

This module provides:
- The `OCREngine` interface the fallback pipeline consumes.
- Building a cleaned DataFrame from pytesseract output.
- Grouping words to lines and lines to page text in reading order.
- Optional preprocessing of page bitmaps before recognition.
- `TesseractEngine`, the default engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import cv2
import numpy as np
import pandas as pd
import pytesseract

from docsum.errors import DependencyMissing, PageRecognitionFailure
from docsum.image.bitmap import Bitmap

OCR_MODES = ("raw", "auto")


@dataclass(frozen=True)
class OCRResult:
    text: str
    confidence: Optional[float] = None


class OCREngine(Protocol):
    def recognize(self, bitmap: Bitmap, language: str = "eng") -> OCRResult:
        ...


def build_dataframe_from_tesseract(data: Dict[str, Any], conf_threshold: float = 0) -> pd.DataFrame:
    """Create and clean a DataFrame from pytesseract.image_to_data output.

    Doxygen:
    - @param data: Dict returned by `pytesseract.image_to_data(..., output_type=Output.DICT)`.
    - @param conf_threshold: Words with confidence at or below this value are dropped.
    - @return: Filtered DataFrame with columns including text, confidence, and layout numbers.
    """
    df = pd.DataFrame(data)
    if df.empty:
        return df
    df['conf'] = pd.to_numeric(df['conf'], errors='coerce').fillna(-1)
    df = df[df['conf'] > max(0, conf_threshold)].copy()
    df['text'] = df['text'].fillna('').astype(str).str.strip()
    df = df[df['text'] != '']
    return df


def group_words_to_lines(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Group OCR words into lines in Tesseract's reading order.

    Doxygen:
    - @param df: DataFrame produced by `build_dataframe_from_tesseract`.
    - @return: List of line dicts with text, block number and mean confidence.
    """
    if df.empty:
        return []
    lines: List[Dict[str, Any]] = []
    group_cols = ['block_num', 'par_num', 'line_num']
    for (block, _, _), g in df.groupby(group_cols, sort=True):
        g_sorted = g.sort_values('word_num') if 'word_num' in g else g.sort_values('left')
        lines.append({
            'text': ' '.join(g_sorted['text'].tolist()),
            'block_num': int(block),
            'confidence': float(g_sorted['conf'].mean()),
        })
    return lines


def lines_to_text(lines: List[Dict[str, Any]]) -> str:
    """Join lines with newlines, leaving a blank line between text blocks."""
    out: List[str] = []
    prev_block = None
    for ln in lines:
        if prev_block is not None and ln['block_num'] != prev_block:
            out.append('')
        out.append(ln['text'])
        prev_block = ln['block_num']
    return '\n'.join(out)


def preprocess_image_for_ocr(img_rgb: np.ndarray) -> np.ndarray:
    """Denoise and binarize an RGB page image to improve OCR on poor scans.

    Doxygen:
    - @param img_rgb: Input image in RGB format.
    - @return: Single-channel binarized image.
    """
    gray = cv2.cvtColor(img_rgb, cv2.COLOR_RGB2GRAY)
    gray = cv2.bilateralFilter(gray, d=7, sigmaColor=50, sigmaSpace=50)
    th = cv2.adaptiveThreshold(gray, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
                               cv2.THRESH_BINARY, 31, 10)
    return cv2.medianBlur(th, 3)


class TesseractEngine:
    """OCR engine backed by the Tesseract binary.

    Doxygen:
    - @param ocr_mode: 'raw' feeds the bitmap as is, 'auto' preprocesses it first.
    - @param conf_threshold: Minimum word confidence to keep.
    - @param tesseract_cmd: Path to the tesseract executable, or None to use PATH.
    - @param timeout: Per-page timeout in seconds (0 disables it).
    """

    def __init__(
        self,
        ocr_mode: str = "raw",
        conf_threshold: float = 0,
        tesseract_cmd: Optional[str] = None,
        timeout: float = 0,
    ) -> None:
        if ocr_mode not in OCR_MODES:
            raise ValueError(f"ocr_mode must be one of {OCR_MODES}, got {ocr_mode!r}")
        self.ocr_mode = ocr_mode
        self.conf_threshold = conf_threshold
        self.timeout = timeout
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, bitmap: Bitmap, language: str = "eng") -> OCRResult:
        img = bitmap.pixels
        if self.ocr_mode == "auto":
            img = preprocess_image_for_ocr(img)

        try:
            data = pytesseract.image_to_data(
                img,
                lang=language,
                output_type=pytesseract.Output.DICT,
                timeout=self.timeout,
            )
        except pytesseract.TesseractNotFoundError as exc:
            raise DependencyMissing(
                "Tesseract is not installed or not on PATH; set tesseract_path in config/dependencies.json."
            ) from exc
        except (pytesseract.TesseractError, RuntimeError) as exc:
            raise PageRecognitionFailure(None, f"Tesseract failed: {exc}") from exc

        df = build_dataframe_from_tesseract(data, conf_threshold=self.conf_threshold)
        lines = group_words_to_lines(df)
        confidence = float(df['conf'].mean()) if not df.empty else None
        return OCRResult(text=lines_to_text(lines), confidence=confidence)
