"""
Compositing of placed fields onto the first page of a PDF.
"""

# Standard Library
import dataclasses
import io
import typing

# PIP3 modules
import PIL.Image
import pypdf
import pypdf.errors
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import pdf_field_overlay as pfo
import pdf_field_overlay.audit
import pdf_field_overlay.config
import pdf_field_overlay.errors
import pdf_field_overlay.fields
import pdf_field_overlay.geometry
import pdf_field_overlay.text_layout


Field = pfo.fields.Field
FieldType = pfo.fields.FieldType
ImageField = pfo.fields.ImageField
ImagePayload = pfo.fields.ImagePayload
FieldCollection = pfo.fields.FieldCollection
Rect = pfo.geometry.Rect
CompositeConfig = pfo.config.CompositeConfig
AuditRecord = pfo.audit.AuditRecord
SkippedField = pfo.audit.SkippedField

InvalidInputError = pfo.errors.InvalidInputError
AssetDecodeError = pfo.errors.AssetDecodeError
GeometryError = pfo.errors.GeometryError
CompositingFailure = pfo.errors.CompositingFailure


@dataclasses.dataclass
class DrawOperation:
	kind: str
	field_id: int | str
	x: float
	y: float
	width: float = 0.0
	height: float = 0.0
	text: str = ""
	font_name: str = ""
	font_size: float = 0.0
	line_width: float = 0.0
	image: PIL.Image.Image | None = None


@dataclasses.dataclass
class CompositeResult:
	document: bytes
	original: bytes
	operations: list[DrawOperation]
	skipped: list[SkippedField]
	audit: AuditRecord


#============================================
def load_image(payload: ImagePayload) -> PIL.Image.Image:
	"""
	Decode an image payload into a fully loaded PIL image.

	Args:
		payload: Image payload from an Image or Signature field.

	Returns:
		PIL image in RGB, RGBA or L mode.
	"""
	raw = payload.to_bytes()
	try:
		image = PIL.Image.open(io.BytesIO(raw))
		image.load()
	except (PIL.UnidentifiedImageError, PIL.Image.DecompressionBombError, OSError, ValueError) as error:
		raise AssetDecodeError(f"cannot decode {payload.mime_type or 'image'}: {error}") from error
	if image.mode not in ("RGB", "RGBA", "L"):
		image = image.convert("RGBA")
	return image


#============================================
def plan_image_field(field: ImageField, box: Rect) -> list[DrawOperation]:
	"""
	Plan the draw operation for an Image or Signature field.
	"""
	if field.value is None:
		return []
	image = load_image(field.value)
	fitted = pfo.geometry.fit_image_rect(box, float(image.width), float(image.height))
	operation = DrawOperation(
		kind="image",
		field_id=field.id,
		x=fitted.x,
		y=fitted.y,
		width=fitted.width,
		height=fitted.height,
		image=image,
	)
	return [operation]


#============================================
def plan_text_field(
	field: Field,
	box: Rect,
	config: CompositeConfig,
	measure: pfo.text_layout.MeasureFunc,
) -> list[DrawOperation]:
	"""
	Plan wrapped text lines for a Text or Date field.
	"""
	lines = pfo.text_layout.wrap_text(
		field.value,
		box.x + config.text_inset,
		box.top,
		box.width,
		config.font_size,
		measure,
		padding=config.text_padding,
		line_height_factor=config.line_height_factor,
	)
	operations: list[DrawOperation] = []
	for line in lines:
		operations.append(
			DrawOperation(
				kind="text",
				field_id=field.id,
				x=line.x,
				y=line.baseline_y,
				text=line.text,
				font_name=config.font_name,
				font_size=config.font_size,
			)
		)
	return operations


#============================================
def plan_radio_field(field: Field, box: Rect, config: CompositeConfig) -> list[DrawOperation]:
	"""
	Plan the border and optional check mark of a Radio field.
	"""
	operations = [
		DrawOperation(
			kind="rect",
			field_id=field.id,
			x=box.x,
			y=box.y,
			width=box.width,
			height=box.height,
			line_width=config.border_width,
		)
	]
	if field.value:
		operations.append(
			DrawOperation(
				kind="text",
				field_id=field.id,
				x=box.x + config.check_inset,
				y=box.y + config.check_inset,
				text=config.check_mark,
				font_name=config.font_name,
				font_size=config.font_size,
			)
		)
	return operations


#============================================
def plan_draw_operations(
	fields: typing.Iterable[Field],
	page_width: float,
	page_height: float,
	config: CompositeConfig | None = None,
	verbose: bool = False,
) -> tuple[list[DrawOperation], list[SkippedField]]:
	"""
	Convert fields into absolute draw operations for one page.

	Fields whose image cannot be decoded or fitted are skipped and
	reported; the rest are still planned.

	Args:
		fields: Fields in draw order.
		page_width: Page width in points.
		page_height: Page height in points.
		config: Compositing configuration.
		verbose: Print skipped fields.

	Returns:
		Tuple of (operations, skipped fields).
	"""
	if config is None:
		config = CompositeConfig()
	measure = pfo.text_layout.string_width_measure(config.font_name, config.font_size)
	operations: list[DrawOperation] = []
	skipped: list[SkippedField] = []
	for field in fields:
		box = pfo.geometry.percent_to_page_rect(
			field.x,
			field.y,
			field.width,
			field.height,
			page_width,
			page_height,
		)
		field_type = field.field_type
		if field_type in (FieldType.IMAGE, FieldType.SIGNATURE):
			try:
				operations.extend(plan_image_field(field, box))
			except (AssetDecodeError, GeometryError) as error:
				skipped.append(SkippedField(field.id, field_type.value, str(error)))
				if verbose:
					print(f"Skipped {field_type.value} field {field.id}: {error}")
		elif field_type in (FieldType.TEXT, FieldType.DATE):
			operations.extend(plan_text_field(field, box, config, measure))
		elif field_type == FieldType.RADIO:
			operations.extend(plan_radio_field(field, box, config))
	return operations, skipped


#============================================
def draw_operation(pdf: reportlab.pdfgen.canvas.Canvas, operation: DrawOperation) -> None:
	"""
	Draw one operation onto the PDF canvas.

	Args:
		pdf: ReportLab canvas.
		operation: Planned draw operation.
	"""
	if operation.kind == "text":
		pdf.setFillColorRGB(0.0, 0.0, 0.0)
		pdf.setFont(operation.font_name, operation.font_size)
		pdf.drawString(operation.x, operation.y, operation.text)
	elif operation.kind == "image":
		pdf.drawImage(
			reportlab.lib.utils.ImageReader(operation.image),
			operation.x,
			operation.y,
			width=operation.width,
			height=operation.height,
			mask="auto",
		)
	elif operation.kind == "rect":
		pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
		pdf.setLineWidth(operation.line_width)
		pdf.rect(operation.x, operation.y, operation.width, operation.height, stroke=1, fill=0)
	else:
		raise ValueError(f"unknown draw operation: {operation.kind}")


#============================================
def render_overlay(
	operations: list[DrawOperation],
	page_width: float,
	page_height: float,
) -> pypdf.PageObject:
	"""
	Render draw operations to a single overlay page.

	Args:
		operations: Planned draw operations.
		page_width: Page width in points.
		page_height: Page height in points.

	Returns:
		PDF page object.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(page_width, page_height))
	for operation in operations:
		draw_operation(pdf, operation)
	pdf.showPage()
	pdf.save()
	buffer.seek(0)
	reader = pypdf.PdfReader(buffer)
	return reader.pages[0]


#============================================
def open_source(source: bytes) -> pypdf.PdfReader:
	"""
	Open the source document and make sure it has a first page.

	Args:
		source: Source PDF bytes.

	Returns:
		PdfReader.
	"""
	if not source:
		raise InvalidInputError("no source document provided")
	try:
		reader = pypdf.PdfReader(io.BytesIO(source))
		page_count = len(reader.pages)
	except (pypdf.errors.PyPdfError, ValueError) as error:
		raise CompositingFailure(f"cannot read source document: {error}") from error
	if page_count == 0:
		raise CompositingFailure("source document has no pages")
	return reader


#============================================
def composite_document(
	source: bytes,
	fields: typing.Iterable[Field],
	config: CompositeConfig | None = None,
	verbose: bool = False,
) -> CompositeResult:
	"""
	Burn fields into the first page of a PDF.

	Args:
		source: Source PDF bytes.
		fields: Fields in draw order.
		config: Compositing configuration.
		verbose: Print progress and skipped fields.

	Returns:
		CompositeResult with the new document and its audit record.
	"""
	fields = list(fields)
	reader = open_source(source)
	try:
		first_page = reader.pages[0]
		media_box = first_page.mediabox
		page_width = float(media_box.width)
		page_height = float(media_box.height)
		origin = (float(media_box.left), float(media_box.bottom))
	except (pypdf.errors.PyPdfError, ValueError, KeyError) as error:
		raise CompositingFailure(f"cannot read first page: {error}") from error
	if verbose:
		print(f"Page size: {page_width:.1f} x {page_height:.1f} pt")

	operations, skipped = plan_draw_operations(fields, page_width, page_height, config, verbose)
	overlay_page = render_overlay(operations, page_width, page_height)

	writer = pypdf.PdfWriter()
	buffer = io.BytesIO()
	try:
		for page in reader.pages:
			writer.add_page(page)
		if operations:
			transform = pypdf.Transformation().translate(origin[0], origin[1])
			writer.pages[0].merge_transformed_page(overlay_page, transform)
		writer.write(buffer)
	except (pypdf.errors.PyPdfError, ValueError, KeyError) as error:
		raise CompositingFailure(f"cannot write composited document: {error}") from error
	document = buffer.getvalue()

	audit = pfo.audit.build_audit_record(source, document, len(fields), skipped)
	if verbose:
		print(f"Fields drawn: {len(fields) - len(skipped)} of {len(fields)}")
		print(f"Original hash: {audit.original_hash}")
		print(f"Final hash: {audit.final_hash}")
	return CompositeResult(
		document=document,
		original=source,
		operations=operations,
		skipped=skipped,
		audit=audit,
	)


#============================================
def composite_records(
	source: bytes,
	records: typing.Iterable[typing.Any],
	config: CompositeConfig | None = None,
	verbose: bool = False,
) -> CompositeResult:
	"""
	Parse wire records and composite them onto the source document.

	Args:
		source: Source PDF bytes.
		records: Field records {id, type, x, y, width, height, value}.
		config: Compositing configuration.
		verbose: Print progress and skipped fields.

	Returns:
		CompositeResult.
	"""
	if not source:
		raise InvalidInputError("no source document provided")
	collection = FieldCollection.from_records(records)
	return composite_document(source, collection, config, verbose)
