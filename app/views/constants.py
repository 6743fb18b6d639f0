"""
UI/view constants centralized for reuse across view modules.

Row heights, margins and the detail block height come from `LayoutMetrics`;
only horizontal placement and styling live here.
"""

from __future__ import annotations

# Row placement
ROW_SIDE_INSET_PX: int = 20  # left/right
ROW_CORNER_RADIUS_PX: int = 10
DETAIL_CORNER_RADIUS_PX: int = 5

# Detail block
DETAIL_PADDING_PX: int = 10
DETAIL_SAVE_BUTTON_HEIGHT_PX: int = 40

# Image loading
ROW_THUMB_SIDE_PX: int = 1024  # longest side kept in memory per row image
PLACEHOLDER_COLOR: str = "#dcdcdc"

# Detail display modes
DETAIL_MODE_INLINE: str = "inline"
DETAIL_MODE_OVERLAY: str = "overlay"
