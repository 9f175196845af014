"""msdfbake - Bake multi-channel signed distance fields from vector outlines.

msdfbake converts closed vector contours (font glyph outlines or sprite paths)
into distance-encoded bitmaps that render with sharp corners at any scale.
The core pipeline validates and colors the contours, generates a 3-channel
distance field, and repairs sign and interpolation artifacts.

Example:
    $ msdfbake glyphs Roboto-Regular.ttf -c "ABC" -s 48

This will write A.png, B.png and C.png multi-channel distance fields into
the current directory.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
