"""Union and subtract compositing of distance fields."""

from msdfbake.domain import MsdfBitmap


def _check_compatible(target: MsdfBitmap, other: MsdfBitmap) -> None:
    target_shape = (target.width, target.height, target.channels)
    if target_shape != (other.width, other.height, other.channels):
        raise ValueError(
            f"Cannot composite {other.width}x{other.height}x{other.channels} onto "
            f"{target.width}x{target.height}x{target.channels}"
        )


def subtract_composite(add: MsdfBitmap, sub: MsdfBitmap) -> MsdfBitmap:
    """Carve sub out of add: min(add, 1 - sub) on every channel.

    Both bitmaps must come from the same projection, size and range.

    Raises:
        ValueError: If the bitmaps differ in size or channel count
    """
    _check_compatible(add, sub)
    result = MsdfBitmap(add.width, add.height, add.channels)
    result.pixels = [min(a, 1.0 - s) for a, s in zip(add.pixels, sub.pixels, strict=True)]
    return result


def union_composite(base: MsdfBitmap, add: MsdfBitmap) -> MsdfBitmap:
    """Add a field onto another: max(base, add) on every channel.

    Raises:
        ValueError: If the bitmaps differ in size or channel count
    """
    _check_compatible(base, add)
    result = MsdfBitmap(base.width, base.height, base.channels)
    result.pixels = [max(b, a) for b, a in zip(base.pixels, add.pixels, strict=True)]
    return result
