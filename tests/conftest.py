"""
Pytest configuration for local imports and shared PDF fixtures.
"""

# Standard Library
import base64
import io
import os
import sys

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()

# PIP3 modules
import PIL.Image
import pytest
import reportlab.lib.pagesizes
import reportlab.pdfgen.canvas


#============================================
def build_source_pdf(page_count: int = 1) -> bytes:
	"""
	Build a letter-size PDF with a caption on each page.

	Args:
		page_count: Number of pages.

	Returns:
		PDF bytes.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=reportlab.lib.pagesizes.letter)
	for index in range(page_count):
		pdf.setFont("Helvetica", 10)
		pdf.drawString(36, 760, f"Source page {index + 1}")
		pdf.showPage()
	pdf.save()
	return buffer.getvalue()


#============================================
def build_png_data_uri(width: int, height: int, color: tuple[int, int, int] = (0, 0, 0)) -> str:
	"""
	Build a solid-color PNG data URI.

	Args:
		width: Image width in pixels.
		height: Image height in pixels.
		color: RGB fill color.

	Returns:
		data:image/png;base64,... string.
	"""
	image = PIL.Image.new("RGB", (width, height), color)
	buffer = io.BytesIO()
	image.save(buffer, format="PNG")
	encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
	return f"data:image/png;base64,{encoded}"


@pytest.fixture
def source_pdf() -> bytes:
	return build_source_pdf()


@pytest.fixture
def two_page_pdf() -> bytes:
	return build_source_pdf(page_count=2)


@pytest.fixture
def png_data_uri() -> str:
	return build_png_data_uri(1200, 600)
