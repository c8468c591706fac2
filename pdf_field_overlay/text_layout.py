"""
Greedy word wrapping of field text into baseline-positioned lines.
"""

# Standard Library
import dataclasses
import typing

# PIP3 modules
import reportlab.pdfbase.pdfmetrics

# local repo modules
import pdf_field_overlay as pfo
import pdf_field_overlay.config


TEXT_WRAP_PADDING = pfo.config.TEXT_WRAP_PADDING
LINE_HEIGHT_FACTOR = pfo.config.LINE_HEIGHT_FACTOR

MeasureFunc = typing.Callable[[str], float]


@dataclasses.dataclass(frozen=True)
class TextLine:
	text: str
	x: float
	baseline_y: float


#============================================
def string_width_measure(font_name: str, font_size: float) -> MeasureFunc:
	"""
	Build a width function for a standard PDF font.

	Args:
		font_name: ReportLab font name.
		font_size: Font size in points.

	Returns:
		Callable returning the rendered width of a string in points.
	"""
	def measure(text: str) -> float:
		return reportlab.pdfbase.pdfmetrics.stringWidth(text, font_name, font_size)

	return measure


#============================================
def wrap_text(
	text: str,
	x: float,
	top_y: float,
	box_width: float,
	font_size: float,
	measure: MeasureFunc,
	padding: float = TEXT_WRAP_PADDING,
	line_height_factor: float = LINE_HEIGHT_FACTOR,
) -> list[TextLine]:
	"""
	Wrap text into lines that fit a width budget.

	Words are added to the current line while the measured line stays
	within box_width - padding. A word that does not fit starts a new
	line unless the current line is empty, so a single over-long word
	stays on its own line. Lines are not limited by box height.

	Args:
		text: Text to wrap.
		x: Left edge for every line.
		top_y: Top edge of the box (page coordinates, y up).
		box_width: Box width in points.
		font_size: Font size in points.
		measure: Width function for the chosen font and size.
		padding: Width reserved from the box.
		line_height_factor: Line pitch as a multiple of font size.

	Returns:
		Lines from top to bottom.
	"""
	words = (text or "").split()
	if not words:
		return []
	effective_width = box_width - padding
	line_height = font_size * line_height_factor
	baseline_y = top_y - font_size

	lines: list[TextLine] = []
	current: list[str] = []
	for word in words:
		candidate = " ".join(current + [word])
		if current and measure(candidate) > effective_width:
			lines.append(TextLine(text=" ".join(current), x=x, baseline_y=baseline_y))
			baseline_y -= line_height
			current = [word]
		else:
			current.append(word)
	lines.append(TextLine(text=" ".join(current), x=x, baseline_y=baseline_y))
	return lines
