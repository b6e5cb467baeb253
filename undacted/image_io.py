"""
Image acquisition and export.

Decodes user-supplied files into RGBA PixelBuffers (raster images via Pillow,
PDF pages via PyMuPDF) and encodes PixelBuffers back to PNG.
"""

import base64
import io
import logging
from pathlib import Path

import cv2
import fitz
import numpy as np
from PIL import Image

from .models import PixelBuffer


logger = logging.getLogger(__name__)

PDF_SUFFIXES = {".pdf"}


def render_pdf_page(pdf_path: Path, page_num: int = 0, dpi: int = 150) -> PixelBuffer:
    """
    Render one page of a PDF to an RGBA buffer.

    Args:
        pdf_path: Path to the PDF file
        page_num: Page index (0-indexed)
        dpi: Resolution for rendering

    Returns:
        PixelBuffer of the rendered page
    """
    # PyMuPDF renders at 72 DPI by default
    zoom = dpi / 72.0
    mat = fitz.Matrix(zoom, zoom)

    with fitz.open(str(pdf_path)) as doc:
        if not 0 <= page_num < len(doc):
            raise ValueError(
                f"Page {page_num} out of range for {pdf_path} ({len(doc)} pages)"
            )
        pix = doc[page_num].get_pixmap(matrix=mat, alpha=False)

    img = np.frombuffer(pix.samples, dtype=np.uint8).reshape(
        pix.height, pix.width, pix.n
    )

    if pix.n == 1:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    elif pix.n == 3:
        img = cv2.cvtColor(img, cv2.COLOR_RGB2RGBA)
    else:
        img = img.copy()

    logger.debug("Rendered %s page %d at %d DPI (%dx%d)", pdf_path, page_num, dpi, pix.width, pix.height)
    return PixelBuffer(img)


def load_image(path: Path, page_num: int = 0, dpi: int = 150) -> PixelBuffer:
    """
    Decode an image or PDF page into an RGBA buffer.

    Args:
        path: Image file (PNG, JPEG, ...) or PDF
        page_num: Page index for PDFs
        dpi: Render DPI for PDFs

    Returns:
        PixelBuffer of the decoded image
    """
    path = Path(path)
    if path.suffix.lower() in PDF_SUFFIXES:
        return render_pdf_page(path, page_num, dpi)

    with Image.open(path) as img:
        rgba = img.convert("RGBA")
    return PixelBuffer(np.array(rgba))


def save_image(buffer: PixelBuffer, output_path: Path, format: str = "PNG") -> Path:
    """
    Save a buffer to disk.

    Args:
        buffer: Pixels to save
        output_path: Path to save to
        format: Image format (PNG, JPEG, etc.)

    Returns:
        The path written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    img = Image.fromarray(np.array(buffer.pixels))
    if format.upper() in ("JPEG", "JPG"):
        # JPEG has no alpha channel
        img = img.convert("RGB")
    img.save(str(output_path), format=format)

    return output_path


def encode_png(buffer: PixelBuffer) -> bytes:
    """Encode a buffer as PNG bytes."""
    out = io.BytesIO()
    Image.fromarray(np.array(buffer.pixels)).save(out, format="PNG")
    return out.getvalue()


def to_data_url(buffer: PixelBuffer) -> str:
    """Encode a buffer as a base64 PNG data URL for browser download."""
    encoded = base64.b64encode(encode_png(buffer)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
