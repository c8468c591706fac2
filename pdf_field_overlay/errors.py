"""
Exception types raised while placing and compositing fields.
"""


class FieldOverlayError(Exception):
	"""
	Base class for all field overlay errors.
	"""


class InvalidInputError(FieldOverlayError, ValueError):
	"""
	Missing source bytes or a malformed field record.
	"""


class AssetDecodeError(FieldOverlayError):
	"""
	A field's embedded image payload could not be decoded.
	"""


class GeometryError(FieldOverlayError, ValueError):
	"""
	Degenerate dimensions passed to a geometry computation.
	"""


class CompositingFailure(FieldOverlayError):
	"""
	The PDF library rejected the source document.
	"""
