"""Core distance field algorithms for msdfbake.

This module contains the core algorithms for:

- Edge coloring (corner detection, channel assignment)
- Contour orientation (scanline winding votes)
- Distance generation (simple, overlapping contour combiner, single channel)
- Post-processing (scanline sign correction, clash error correction)
- Subtract compositing of sprite fields
- Glyph framing, baking pipelines and parallel batch baking

All generation passes are designed to be:
- Deterministic (explicit seeds, no module state)
- Synchronous and single-threaded per shape (safe in worker processes)
- Read-only on the shape once generation begins

Key functions:
- color_edges: Assign channel colors to every edge
- orient_contours: Reverse contours that contradict their fill role
- generate_msdf / generate_msdf_simple / generate_sdf: Distance generators
- distance_sign_correction: Fix fill misclassification
- error_correction: Equalize clashing texels
- render_glyph / rasterize_sprite: End-to-end pipelines

Key classes:
- Projection: Texel to shape-space mapping
- GlyphBaker: Bakes glyphs of a font in parallel
"""

from msdfbake.core.coloring import color_edges, switch_color
from msdfbake.core.compositor import subtract_composite, union_composite
from msdfbake.core.error_correction import clash_threshold, detect_clash, error_correction
from msdfbake.core.generator import generate_msdf, generate_msdf_simple, generate_sdf
from msdfbake.core.orientation import orient_contours
from msdfbake.core.pipeline import prepare_shape, rasterize_sprite, render_glyph
from msdfbake.core.processor import GlyphBaker, bake_glyph
from msdfbake.core.projection import GlyphFrame, Projection, frame_glyph
from msdfbake.core.selectors import MultiDistanceSelector, PerpendicularDistanceSelector
from msdfbake.core.sign_correction import distance_sign_correction

__all__ = [
    # Processor classes
    "GlyphBaker",
    "GlyphFrame",
    # Selectors
    "MultiDistanceSelector",
    "PerpendicularDistanceSelector",
    "Projection",
    # Functions
    "bake_glyph",
    "clash_threshold",
    "color_edges",
    "detect_clash",
    "distance_sign_correction",
    "error_correction",
    "frame_glyph",
    "generate_msdf",
    "generate_msdf_simple",
    "generate_sdf",
    "orient_contours",
    "prepare_shape",
    "rasterize_sprite",
    "render_glyph",
    "subtract_composite",
    "switch_color",
    "union_composite",
]
