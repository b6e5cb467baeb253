"""
Data models for redaction analysis.

Defines the pixel buffer view, rectangles, matched profiles, analysis
parameters and the summary produced by a full analysis pass.
"""

from dataclasses import dataclass, asdict
from typing import Optional, Mapping

import numpy as np


@dataclass(frozen=True)
class Rect:
    """
    An axis-aligned rectangle in buffer pixel coordinates.

    (x, y) is the top-left pixel; w and h are sizes in pixels.
    """
    x: int
    y: int
    w: int
    h: int

    @property
    def x1(self) -> int:
        return self.x + self.w

    @property
    def y1(self) -> int:
        return self.y + self.h

    @property
    def area(self) -> int:
        return self.w * self.h

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.w / 2, self.y + self.h / 2)

    def is_degenerate(self, min_size: int = 5) -> bool:
        """True if the rect is too small to be reported as a redaction block."""
        return self.w < min_size or self.h < min_size

    @classmethod
    def from_corners(cls, x0: int, y0: int, x1: int, y1: int) -> "Rect":
        """
        Build a rect from two drag corners given in any order.

        Args:
            x0, y0: Where the drag started
            x1, y1: Where the drag ended

        Returns:
            Rect with non-negative width and height
        """
        return cls(
            x=min(x0, x1),
            y=min(y0, y1),
            w=abs(x1 - x0),
            h=abs(y1 - y0),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Profile:
    """
    A candidate match returned by the external profile lookup.

    Fields are rendered as-is and never validated.
    """
    id: str
    name: str
    role: str
    clearance: str
    email: str = ""

    @classmethod
    def from_dict(cls, data: Mapping) -> "Profile":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            role=str(data.get("role", "")),
            clearance=str(data.get("clearance", "")),
            email=str(data.get("email", "")),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    Read-only view over an RGBA raster.

    The wrapped array has shape (height, width, 4) and dtype uint8, laid out
    row-major so that its raw bytes are W*H*4 RGBA samples. Writable arrays
    are copied on construction; read-only arrays are wrapped as-is.
    """
    pixels: np.ndarray

    def __post_init__(self):
        arr = np.asarray(self.pixels)
        if arr.dtype != np.uint8:
            raise ValueError(f"PixelBuffer requires uint8 samples, got {arr.dtype}")
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise ValueError(
                f"PixelBuffer requires an (H, W, 4) array, got shape {arr.shape}"
            )

        # Writable input is copied so the caller cannot alias the buffer
        if arr.flags.writeable:
            arr = arr.copy()
        view = arr.view()
        view.flags.writeable = False
        object.__setattr__(self, "pixels", view)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> "PixelBuffer":
        """
        Wrap raw row-major RGBA bytes.

        Args:
            width: Buffer width in pixels
            height: Buffer height in pixels
            data: Exactly width * height * 4 bytes

        Returns:
            PixelBuffer over a private copy of the data
        """
        expected = width * height * 4
        if len(data) != expected:
            raise ValueError(
                f"Expected {expected} bytes for a {width}x{height} RGBA buffer, "
                f"got {len(data)}"
            )
        arr = np.frombuffer(bytes(data), dtype=np.uint8).reshape(height, width, 4)
        return cls(arr)

    def to_bytes(self) -> bytes:
        return self.pixels.tobytes()

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def region(self, rect: Rect) -> np.ndarray:
        """
        Return the pixels covered by a rect, clipped to the buffer.

        The result is a read-only view and may be empty.
        """
        x0 = max(0, rect.x)
        y0 = max(0, rect.y)
        x1 = min(self.width, rect.x + max(0, rect.w))
        y1 = min(self.height, rect.y + max(0, rect.h))

        if x1 <= x0 or y1 <= y0:
            return self.pixels[0:0, 0:0]

        return self.pixels[y0:y1, x0:x1]


@dataclass(frozen=True)
class ArtifactResult:
    """Result of artifact (lazy redaction) analysis for one rect."""
    artifact_pixels: int
    total_pixels: int
    artifact_ratio: float
    mean_luminance: float
    is_lazy: bool


@dataclass
class AnalysisSummary:
    """
    Metrics from analysing one redaction against one reference box.
    """
    redaction_rect: Rect
    reference_rect: Rect
    reference_text: str
    estimated_hidden_chars: int
    reference_density: Optional[float]  # px per character
    lazy_redaction_detected: bool
    artifact_ratio: float

    @property
    def redaction_width(self) -> int:
        return self.redaction_rect.w

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "redaction_rect": self.redaction_rect.to_dict(),
            "reference_rect": self.reference_rect.to_dict(),
            "reference_text": self.reference_text,
            "redaction_width": self.redaction_width,
            "reference_density": self.reference_density,
            "estimated_hidden_chars": self.estimated_hidden_chars,
            "lazy_redaction_detected": self.lazy_redaction_detected,
            "artifact_ratio": self.artifact_ratio,
        }

    def format_report(self) -> str:
        """Render the metrics block shown to the analyst."""
        density = (
            f"{self.reference_density:.2f} px/char"
            if self.reference_density is not None
            else "n/a"
        )
        lines = [
            "ANALYSIS COMPLETE.",
            "",
            "Metrics:",
            f"- Reference Density: {density}",
            f"- Redaction Width: {self.redaction_width}px",
            f"- Estimated Hidden Length: {self.estimated_hidden_chars} characters",
        ]
        if self.lazy_redaction_detected:
            lines.append("- VULNERABILITY: Non-destructive redaction detected.")
        return "\n".join(lines)


@dataclass
class AnalysisParams:
    """Parameters for redaction analysis."""
    dark_threshold: float = 60  # Luminance below this is part of a redaction block
    artifact_threshold: float = 30  # Luminance above this inside a box is suspicious
    artifact_ceiling: float = 250  # Luminance at or above this is background/halo
    artifact_ratio: float = 0.05  # Suspicious pixel share that flags lazy redaction
    min_region_size: int = 5  # Smallest width/height a detection may have
    footer_height: int = 150  # Rows appended by the report compositor
    dpi: int = 150  # Render DPI for PDF sources

    def to_dict(self) -> dict:
        return asdict(self)
