"""
Shared configuration and constants.
"""

import dataclasses


PERCENT_SCALE = 100.0

MIN_FIELD_WIDTH = 5.0
MIN_FIELD_HEIGHT = 2.0

DEFAULT_FIELD_X = 35.0
DEFAULT_FIELD_Y = 10.0
DEFAULT_FIELD_SIZES = {
	"Text": (20.0, 5.0),
	"Image": (25.0, 15.0),
	"Signature": (20.0, 8.0),
	"Date": (15.0, 4.0),
	"Radio": (5.0, 3.0),
}

DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_TEXT_SIZE = 12.0
LINE_HEIGHT_FACTOR = 1.4
TEXT_WRAP_PADDING = 10.0
TEXT_INSET = 2.0
CHECK_INSET = 4.0
CHECK_MARK = "X"
BORDER_WIDTH = 1.0

AUDIT_LOG_NAME = "audit_log.json"
OUTPUT_PREFIX = "signed_"


@dataclasses.dataclass
class PlacementPolicy:
	clamp_resize: bool = False
	min_width: float = MIN_FIELD_WIDTH
	min_height: float = MIN_FIELD_HEIGHT


@dataclasses.dataclass
class CompositeConfig:
	font_name: str = DEFAULT_FONT_REGULAR
	font_size: float = DEFAULT_TEXT_SIZE
	line_height_factor: float = LINE_HEIGHT_FACTOR
	text_padding: float = TEXT_WRAP_PADDING
	text_inset: float = TEXT_INSET
	check_inset: float = CHECK_INSET
	check_mark: str = CHECK_MARK
	border_width: float = BORDER_WIDTH
