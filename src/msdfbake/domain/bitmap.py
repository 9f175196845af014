"""Distance bitmaps.

Two bitmap types are used:
- MsdfBitmap: float working bitmap the generators and correction passes
  operate on. Values are range-normalized so that 0.5 lies on the edge.
- ByteImage: caller-owned byte buffer the finished field is written into,
  addressed by row and column, 1 or 3 channels per texel.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from msdfbake.domain.vector import median
from msdfbake.exceptions import RegionError


class OutputFormat(str, Enum):
    """Kind of texture an asset carries."""

    NORMAL = "normal"
    SDF = "sdf"
    MSDF = "msdf"

    @property
    def channels(self) -> int:
        """Channel count of the distance bitmap for this format."""
        return 1 if self is OutputFormat.SDF else 3


class MsdfBitmap:
    """Row-major float bitmap with 1 or 3 channels per texel.

    Example:
        bitmap = MsdfBitmap(32, 32)
        bitmap.set(0, 0, (0.5, 0.5, 0.5))
        r, g, b = bitmap.get(0, 0)
    """

    __slots__ = ("channels", "height", "pixels", "width")

    def __init__(self, width: int, height: int, channels: int = 3) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"Invalid bitmap size {width}x{height}")
        if channels not in (1, 3):
            raise ValueError(f"Expected 1 or 3 channels, got {channels}")
        self.width = width
        self.height = height
        self.channels = channels
        self.pixels: list[float] = [0.0] * (width * height * channels)

    def _offset(self, x: int, y: int) -> int:
        return (y * self.width + x) * self.channels

    def get(self, x: int, y: int) -> tuple[float, ...]:
        """Channel values of the texel at column x, row y."""
        i = self._offset(x, y)
        return tuple(self.pixels[i : i + self.channels])

    def set(self, x: int, y: int, values: tuple[float, ...] | list[float]) -> None:
        """Overwrite the channel values of the texel at column x, row y."""
        i = self._offset(x, y)
        self.pixels[i : i + self.channels] = values

    def median(self, x: int, y: int) -> float:
        """Reconstructed scalar value of the texel (median of channels)."""
        values = self.get(x, y)
        if self.channels == 1:
            return values[0]
        return median(*values)

    def copy(self) -> "MsdfBitmap":
        """Independent copy of the bitmap."""
        clone = MsdfBitmap(self.width, self.height, self.channels)
        clone.pixels = list(self.pixels)
        return clone

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "width": self.width,
            "height": self.height,
            "channels": self.channels,
            "pixels": self.pixels,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MsdfBitmap":
        """Deserialize from dictionary."""
        bitmap = cls(data["width"], data["height"], data["channels"])
        bitmap.pixels = list(data["pixels"])
        return bitmap


def encode_distance(value: float) -> int:
    """Convert a normalized distance to a byte, clamping to [0, 1]."""
    return int(min(max(value, 0.0), 1.0) * 255.0)


def decode_distance(byte: int, range_: float) -> float:
    """Invert encode_distance back to a signed distance in range units."""
    return (byte / 255.0 - 0.5) * (range_ * 2.0)


@dataclass
class ByteImage:
    """Caller-owned byte buffer addressed by row and column.

    Attributes:
        width: Image width in texels
        height: Image height in texels
        channels: Bytes per texel (1 or 3)
        buffer: Row-major texel bytes, allocated when not provided
    """

    width: int
    height: int
    channels: int = 3
    buffer: bytearray = field(default_factory=bytearray)

    def __post_init__(self) -> None:
        size = self.width * self.height * self.channels
        if not self.buffer:
            self.buffer = bytearray(size)
        elif len(self.buffer) != size:
            raise RegionError(
                f"Buffer holds {len(self.buffer)} bytes, expected {size} for "
                f"{self.width}x{self.height}x{self.channels}"
            )

    def get(self, x: int, y: int) -> tuple[int, ...]:
        """Byte values of the texel at column x, row y."""
        i = (y * self.width + x) * self.channels
        return tuple(self.buffer[i : i + self.channels])

    def write_region(
        self,
        bitmap: MsdfBitmap,
        position: tuple[int, int] = (0, 0),
    ) -> None:
        """Encode a float bitmap into the region starting at position.

        The region is fully overwritten. A 3-channel bitmap written into a
        1-channel image stores the median; a 1-channel bitmap written into a
        3-channel image is replicated.

        Args:
            bitmap: Normalized distance bitmap
            position: (x, y) of the region's top-left texel

        Raises:
            RegionError: If the region does not fit inside the image
        """
        ox, oy = position
        if ox < 0 or oy < 0 or ox + bitmap.width > self.width or oy + bitmap.height > self.height:
            raise RegionError(
                f"Region {bitmap.width}x{bitmap.height} at ({ox}, {oy}) does not fit "
                f"in {self.width}x{self.height} image"
            )

        for y in range(bitmap.height):
            for x in range(bitmap.width):
                values = bitmap.get(x, y)
                if self.channels == 1 and bitmap.channels == 3:
                    encoded = [encode_distance(median(*values))]
                elif self.channels == 3 and bitmap.channels == 1:
                    encoded = [encode_distance(values[0])] * 3
                else:
                    encoded = [encode_distance(v) for v in values]
                i = ((oy + y) * self.width + ox + x) * self.channels
                self.buffer[i : i + self.channels] = bytes(encoded)
