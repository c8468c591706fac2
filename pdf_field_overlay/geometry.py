"""
Coordinate conversion between percentage space and PDF page space,
plus aspect-preserving image fitting.
"""

# Standard Library
import dataclasses
import math

# local repo modules
import pdf_field_overlay as pfo
import pdf_field_overlay.config
import pdf_field_overlay.errors


GeometryError = pfo.errors.GeometryError

PERCENT_SCALE = pfo.config.PERCENT_SCALE


@dataclasses.dataclass(frozen=True)
class Rect:
	x: float
	y: float
	width: float
	height: float

	@property
	def top(self) -> float:
		return self.y + self.height

	@property
	def right(self) -> float:
		return self.x + self.width


#============================================
def clamp(value: float, low: float, high: float) -> float:
	"""
	Clamp a value into [low, high].

	The lower bound wins when the range is empty.

	Args:
		value: Input value.
		low: Lower bound.
		high: Upper bound.

	Returns:
		Clamped value.
	"""
	return max(min(value, high), low)


#============================================
def percent_to_page_rect(
	x: float,
	y: float,
	width: float,
	height: float,
	page_width: float,
	page_height: float,
) -> Rect:
	"""
	Convert a percentage rectangle (origin top-left, y down) into
	page coordinates (origin bottom-left, y up).

	Args:
		x: Left edge in percent of page width.
		y: Top edge in percent of page height.
		width: Width in percent of page width.
		height: Height in percent of page height.
		page_width: Page width in points.
		page_height: Page height in points.

	Returns:
		Rect in page coordinates, anchored at its bottom-left corner.
	"""
	abs_width = (width / PERCENT_SCALE) * page_width
	abs_height = (height / PERCENT_SCALE) * page_height
	abs_x = (x / PERCENT_SCALE) * page_width
	abs_y = page_height - (y / PERCENT_SCALE) * page_height - abs_height
	return Rect(x=abs_x, y=abs_y, width=abs_width, height=abs_height)


#============================================
def page_rect_to_percent(
	rect: Rect,
	page_width: float,
	page_height: float,
) -> tuple[float, float, float, float]:
	"""
	Convert a page rectangle back into percentage space.

	Args:
		rect: Rect in page coordinates.
		page_width: Page width in points.
		page_height: Page height in points.

	Returns:
		Tuple of (x, y, width, height) in percent.
	"""
	if page_width <= 0.0 or page_height <= 0.0:
		raise GeometryError(f"page size must be positive, got {page_width}x{page_height}")
	x = rect.x / page_width * PERCENT_SCALE
	width = rect.width / page_width * PERCENT_SCALE
	height = rect.height / page_height * PERCENT_SCALE
	y = (page_height - rect.y - rect.height) / page_height * PERCENT_SCALE
	return (x, y, width, height)


#============================================
def fit_image_rect(box: Rect, image_width: float, image_height: float) -> Rect:
	"""
	Scale an image into a box, keeping its aspect ratio, and center it.

	Args:
		box: Target box in page coordinates.
		image_width: Intrinsic image width.
		image_height: Intrinsic image height.

	Returns:
		Placement rect inside the box.
	"""
	dimensions = (box.width, box.height, image_width, image_height)
	for value in dimensions:
		if not math.isfinite(value) or value <= 0.0:
			raise GeometryError(
				f"cannot fit image {image_width}x{image_height} into box {box.width}x{box.height}"
			)
	scale = min(box.width / image_width, box.height / image_height)
	new_width = image_width * scale
	new_height = image_height * scale
	return Rect(
		x=box.x + (box.width - new_width) / 2.0,
		y=box.y + (box.height - new_height) / 2.0,
		width=new_width,
		height=new_height,
	)
