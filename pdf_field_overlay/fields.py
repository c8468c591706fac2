"""
Field model: typed field variants, image payloads and the ordered
field collection owned by an editing session.
"""

# Standard Library
import base64
import binascii
import dataclasses
import datetime
import enum
import math
import time
import typing

# local repo modules
import pdf_field_overlay as pfo
import pdf_field_overlay.config
import pdf_field_overlay.errors


InvalidInputError = pfo.errors.InvalidInputError
AssetDecodeError = pfo.errors.AssetDecodeError

PERCENT_SCALE = pfo.config.PERCENT_SCALE
DEFAULT_FIELD_X = pfo.config.DEFAULT_FIELD_X
DEFAULT_FIELD_Y = pfo.config.DEFAULT_FIELD_Y
DEFAULT_FIELD_SIZES = pfo.config.DEFAULT_FIELD_SIZES

GEOMETRY_KEYS = ("x", "y", "width", "height")


class FieldType(str, enum.Enum):
	TEXT = "Text"
	IMAGE = "Image"
	SIGNATURE = "Signature"
	DATE = "Date"
	RADIO = "Radio"


#============================================
def today_iso() -> str:
	"""
	Return the current local date as YYYY-MM-DD.
	"""
	return datetime.date.today().isoformat()


@dataclasses.dataclass(frozen=True)
class ImagePayload:
	"""
	Encoded image attached to an Image or Signature field.

	Holds either raw bytes with a format tag or a data URI string,
	never both.
	"""
	data: bytes | None = None
	image_format: str = ""
	data_uri: str | None = None

	def __post_init__(self) -> None:
		has_data = self.data is not None
		has_uri = self.data_uri is not None
		if has_data == has_uri:
			raise InvalidInputError("image payload needs exactly one of raw bytes or a data URI")
		if has_data and not self.image_format:
			raise InvalidInputError("raw image bytes need a format tag")

	@classmethod
	def from_bytes(cls, data: bytes, image_format: str) -> "ImagePayload":
		return cls(data=bytes(data), image_format=image_format.strip().lower())

	@classmethod
	def from_data_uri(cls, data_uri: str) -> "ImagePayload":
		return cls(data_uri=data_uri)

	@property
	def mime_type(self) -> str:
		if self.data is not None:
			return f"image/{self.image_format}"
		header = self.data_uri.split(",", 1)[0]
		if header.startswith("data:"):
			return header[len("data:"):].split(";", 1)[0]
		return ""

	def to_bytes(self) -> bytes:
		"""
		Return the raw encoded image bytes.

		Raises:
			AssetDecodeError: The data URI is not valid base64 image data.
		"""
		if self.data is not None:
			return self.data
		header, sep, encoded = self.data_uri.partition(",")
		if not sep or not header.startswith("data:image") or ";base64" not in header:
			raise AssetDecodeError(f"not a base64 image data URI: {header[:40]!r}")
		try:
			return base64.b64decode(encoded, validate=True)
		except (binascii.Error, ValueError) as error:
			raise AssetDecodeError(f"invalid base64 image data: {error}") from error

	def to_data_uri(self) -> str:
		if self.data_uri is not None:
			return self.data_uri
		encoded = base64.b64encode(self.data).decode("ascii")
		return f"data:{self.mime_type};base64,{encoded}"


@dataclasses.dataclass(frozen=True)
class Field:
	id: int | str
	x: float
	y: float
	width: float
	height: float

	field_type: typing.ClassVar[FieldType]

	@classmethod
	def coerce_value(cls, value: typing.Any) -> typing.Any:
		raise NotImplementedError

	def with_value(self, value: typing.Any) -> "Field":
		"""
		Return a copy carrying a new value of the right shape.
		"""
		return dataclasses.replace(self, value=self.coerce_value(value))

	def with_geometry(self, x: float, y: float, width: float, height: float) -> "Field":
		return dataclasses.replace(self, x=x, y=y, width=width, height=height)

	def record_value(self) -> typing.Any:
		return self.value

	def to_record(self) -> dict:
		"""
		Serialize the field to its wire record.
		"""
		return {
			"id": self.id,
			"type": self.field_type.value,
			"x": self.x,
			"y": self.y,
			"width": self.width,
			"height": self.height,
			"value": self.record_value(),
		}


@dataclasses.dataclass(frozen=True)
class TextField(Field):
	value: str = ""

	field_type: typing.ClassVar[FieldType] = FieldType.TEXT

	@classmethod
	def coerce_value(cls, value: typing.Any) -> str:
		if value is None:
			return ""
		if not isinstance(value, str):
			raise InvalidInputError(f"{cls.field_type.value} value must be a string")
		return value


@dataclasses.dataclass(frozen=True)
class DateField(TextField):
	value: str = dataclasses.field(default_factory=today_iso)

	field_type: typing.ClassVar[FieldType] = FieldType.DATE

	@classmethod
	def coerce_value(cls, value: typing.Any) -> str:
		if value is None:
			return today_iso()
		return super().coerce_value(value)


@dataclasses.dataclass(frozen=True)
class ImageField(Field):
	value: ImagePayload | None = None

	field_type: typing.ClassVar[FieldType] = FieldType.IMAGE

	@classmethod
	def coerce_value(cls, value: typing.Any) -> ImagePayload | None:
		if value is None or value == "":
			return None
		if isinstance(value, ImagePayload):
			return value
		if isinstance(value, str):
			return ImagePayload.from_data_uri(value)
		raise InvalidInputError(f"{cls.field_type.value} value must be a data URI or ImagePayload")

	def record_value(self) -> str:
		if self.value is None:
			return ""
		return self.value.to_data_uri()


@dataclasses.dataclass(frozen=True)
class SignatureField(ImageField):
	field_type: typing.ClassVar[FieldType] = FieldType.SIGNATURE


@dataclasses.dataclass(frozen=True)
class RadioField(Field):
	value: bool = False

	field_type: typing.ClassVar[FieldType] = FieldType.RADIO

	@classmethod
	def coerce_value(cls, value: typing.Any) -> bool:
		if value is None:
			return False
		if not isinstance(value, bool):
			raise InvalidInputError("Radio value must be a boolean")
		return value


FIELD_CLASSES: dict[FieldType, type[Field]] = {
	FieldType.TEXT: TextField,
	FieldType.IMAGE: ImageField,
	FieldType.SIGNATURE: SignatureField,
	FieldType.DATE: DateField,
	FieldType.RADIO: RadioField,
}


#============================================
def create_field(field_type: FieldType | str, field_id: int | str) -> Field:
	"""
	Create a field with the default size and value for its type.

	Args:
		field_type: Field type or its name.
		field_id: Unique field id.

	Returns:
		New Field instance.
	"""
	field_type = parse_field_type(field_type)
	width, height = DEFAULT_FIELD_SIZES[field_type.value]
	field_class = FIELD_CLASSES[field_type]
	return field_class(
		id=field_id,
		x=DEFAULT_FIELD_X,
		y=DEFAULT_FIELD_Y,
		width=width,
		height=height,
	)


#============================================
def parse_field_type(value: typing.Any) -> FieldType:
	"""
	Parse a field type name.

	Args:
		value: FieldType or string like "Text".

	Returns:
		FieldType.
	"""
	try:
		return FieldType(value)
	except ValueError as error:
		raise InvalidInputError(f"unknown field type: {value!r}") from error


#============================================
def parse_percent(record: dict, key: str) -> float:
	"""
	Read one percentage coordinate from a record.

	Args:
		record: Field record.
		key: Coordinate key.

	Returns:
		Value as float within [0, 100].
	"""
	if key not in record:
		raise InvalidInputError(f"field record missing {key!r}")
	value = record[key]
	if isinstance(value, bool) or not isinstance(value, (int, float)):
		raise InvalidInputError(f"field {key!r} must be a number, got {value!r}")
	value = float(value)
	if not math.isfinite(value) or value < 0.0 or value > PERCENT_SCALE:
		raise InvalidInputError(f"field {key!r} out of range [0, 100]: {value}")
	return value


#============================================
def parse_field_record(record: typing.Any) -> Field:
	"""
	Parse a wire record {id, type, x, y, width, height, value}.

	Args:
		record: Decoded JSON object.

	Returns:
		Typed Field instance.
	"""
	if not isinstance(record, dict):
		raise InvalidInputError(f"field record must be an object, got {type(record).__name__}")
	field_id = record.get("id")
	if field_id is None or isinstance(field_id, bool) or not isinstance(field_id, (int, str)):
		raise InvalidInputError(f"field record has invalid id: {field_id!r}")
	if "type" not in record:
		raise InvalidInputError(f"field {field_id!r} missing 'type'")
	field_class = FIELD_CLASSES[parse_field_type(record["type"])]
	geometry = {key: parse_percent(record, key) for key in GEOMETRY_KEYS}
	value = field_class.coerce_value(record.get("value"))
	return field_class(id=field_id, value=value, **geometry)


class FieldCollection:
	"""
	Ordered fields of one editing session; later entries draw on top.
	"""

	def __init__(self, fields: typing.Iterable[Field] = ()) -> None:
		self._fields: list[Field] = []
		self._last_id = 0
		for field in fields:
			self.add(field)

	def __iter__(self) -> typing.Iterator[Field]:
		return iter(list(self._fields))

	def __len__(self) -> int:
		return len(self._fields)

	def __contains__(self, field_id: object) -> bool:
		return any(field.id == field_id for field in self._fields)

	def _index_of(self, field_id: int | str) -> int:
		for index, field in enumerate(self._fields):
			if field.id == field_id:
				return index
		raise KeyError(f"no field with id {field_id!r}")

	def next_id(self) -> int:
		"""
		Return a millisecond timestamp id, bumped to stay strictly increasing.
		"""
		candidate = time.time_ns() // 1_000_000
		if candidate <= self._last_id:
			candidate = self._last_id + 1
		self._last_id = candidate
		return candidate

	def new_field(self, field_type: FieldType | str) -> Field:
		field = create_field(field_type, self.next_id())
		self.add(field)
		return field

	def add(self, field: Field) -> None:
		if field.id in self:
			raise InvalidInputError(f"duplicate field id: {field.id!r}")
		if isinstance(field.id, int):
			self._last_id = max(self._last_id, field.id)
		self._fields.append(field)

	def get(self, field_id: int | str) -> Field:
		return self._fields[self._index_of(field_id)]

	def replace(self, field: Field) -> None:
		self._fields[self._index_of(field.id)] = field

	def remove(self, field_id: int | str) -> Field:
		return self._fields.pop(self._index_of(field_id))

	def to_records(self) -> list[dict]:
		return [field.to_record() for field in self._fields]

	@classmethod
	def from_records(cls, records: typing.Iterable[typing.Any]) -> "FieldCollection":
		return cls(parse_field_record(record) for record in records)
