"""
Interactive placement engine: turns pointer gestures into field geometry.
"""

# Standard Library
import dataclasses
import enum
import typing

# local repo modules
import pdf_field_overlay as pfo
import pdf_field_overlay.config
import pdf_field_overlay.errors
import pdf_field_overlay.fields
import pdf_field_overlay.geometry


Field = pfo.fields.Field
FieldCollection = pfo.fields.FieldCollection
FieldType = pfo.fields.FieldType
RadioField = pfo.fields.RadioField
PlacementPolicy = pfo.config.PlacementPolicy
InvalidInputError = pfo.errors.InvalidInputError

PERCENT_SCALE = pfo.config.PERCENT_SCALE


class GestureKind(str, enum.Enum):
	MOVE = "move"
	RESIZE = "resize"


class EngineState(str, enum.Enum):
	IDLE = "idle"
	DRAGGING = "dragging"


@dataclasses.dataclass(frozen=True)
class Gesture:
	"""
	Snapshot taken at pointer-down; lives until release or cancel.
	"""
	field_id: int | str
	kind: GestureKind
	start_x: float
	start_y: float
	field: Field
	page_width: float
	page_height: float


@dataclasses.dataclass(frozen=True)
class PointerEvent:
	"""
	Pointer input as seen by the engine.

	kind is one of "down", "move", "up" or "cancel". field_id and
	action are only read for "down"; page size is the rendered page
	size in pixels at that moment.
	"""
	kind: str
	x: float = 0.0
	y: float = 0.0
	field_id: int | str | None = None
	action: GestureKind | str = GestureKind.MOVE
	page_width: float = 0.0
	page_height: float = 0.0


#============================================
def next_field(
	gesture: Gesture,
	pointer_x: float,
	pointer_y: float,
	policy: PlacementPolicy | None = None,
) -> Field:
	"""
	Compute the field geometry for a pointer position during a gesture.

	Args:
		gesture: Active gesture snapshot.
		pointer_x: Current pointer x in pixels.
		pointer_y: Current pointer y in pixels.
		policy: Placement policy; defaults to PlacementPolicy().

	Returns:
		Field with updated geometry.
	"""
	if policy is None:
		policy = PlacementPolicy()
	field = gesture.field
	dx_percent = (pointer_x - gesture.start_x) / gesture.page_width * PERCENT_SCALE
	dy_percent = (pointer_y - gesture.start_y) / gesture.page_height * PERCENT_SCALE

	if gesture.kind == GestureKind.MOVE:
		new_x = pfo.geometry.clamp(field.x + dx_percent, 0.0, PERCENT_SCALE - field.width)
		new_y = pfo.geometry.clamp(field.y + dy_percent, 0.0, PERCENT_SCALE - field.height)
		return field.with_geometry(new_x, new_y, field.width, field.height)

	new_width = max(field.width + dx_percent, policy.min_width)
	new_height = max(field.height + dy_percent, policy.min_height)
	new_x = field.x
	new_y = field.y
	if policy.clamp_resize:
		new_width = min(new_width, max(PERCENT_SCALE - field.x, policy.min_width))
		new_height = min(new_height, max(PERCENT_SCALE - field.y, policy.min_height))
		# a field already past the edge is pulled back so the floor still fits
		new_x = min(field.x, PERCENT_SCALE - new_width)
		new_y = min(field.y, PERCENT_SCALE - new_height)
	return field.with_geometry(new_x, new_y, new_width, new_height)


class PlacementEngine:
	"""
	Maintains a FieldCollection from pointer gestures and editor commands.

	Only one gesture is active at a time. A pointer-down while dragging
	is ignored until the active gesture ends.
	"""

	def __init__(self, collection: FieldCollection, policy: PlacementPolicy | None = None) -> None:
		self.collection = collection
		self.policy = policy or PlacementPolicy()
		self.selected_id: int | str | None = None
		self._gesture: Gesture | None = None

	@property
	def state(self) -> EngineState:
		if self._gesture is None:
			return EngineState.IDLE
		return EngineState.DRAGGING

	@property
	def gesture(self) -> Gesture | None:
		return self._gesture

	def add_field(self, field_type: FieldType | str) -> Field:
		field = self.collection.new_field(field_type)
		self.selected_id = field.id
		return field

	def delete_field(self, field_id: int | str) -> Field:
		if self._gesture is not None and self._gesture.field_id == field_id:
			self._gesture = None
		removed = self.collection.remove(field_id)
		self.selected_id = None
		return removed

	def update_value(self, field_id: int | str, value: typing.Any) -> Field:
		field = self.collection.get(field_id).with_value(value)
		self.collection.replace(field)
		return field

	def toggle_radio(self, field_id: int | str) -> Field:
		field = self.collection.get(field_id)
		if not isinstance(field, RadioField):
			raise InvalidInputError(f"field {field_id!r} is not a Radio field")
		return self.update_value(field_id, not field.value)

	def select(self, field_id: int | str | None) -> None:
		if field_id is not None:
			self.collection.get(field_id)
		self.selected_id = field_id

	def begin_gesture(
		self,
		field_id: int | str,
		kind: GestureKind | str,
		pointer_x: float,
		pointer_y: float,
		page_width: float,
		page_height: float,
	) -> bool:
		"""
		Start a move or resize gesture on a field.

		Args:
			field_id: Field under the pointer.
			kind: "move" or "resize".
			pointer_x: Pointer x in pixels.
			pointer_y: Pointer y in pixels.
			page_width: Rendered page width in pixels.
			page_height: Rendered page height in pixels.

		Returns:
			True if a gesture started, False if one was already active.
		"""
		if self._gesture is not None:
			return False
		if page_width <= 0.0 or page_height <= 0.0:
			raise InvalidInputError(f"page size must be positive, got {page_width}x{page_height}")
		try:
			kind = GestureKind(kind)
		except ValueError as error:
			raise InvalidInputError(f"unknown gesture kind: {kind!r}") from error
		field = self.collection.get(field_id)
		self.selected_id = field_id
		self._gesture = Gesture(
			field_id=field_id,
			kind=kind,
			start_x=pointer_x,
			start_y=pointer_y,
			field=field,
			page_width=page_width,
			page_height=page_height,
		)
		return True

	def pointer_move(self, pointer_x: float, pointer_y: float) -> Field | None:
		"""
		Apply a pointer move to the active gesture's field.

		Returns:
			Updated field, or None when idle.
		"""
		if self._gesture is None:
			return None
		moved = next_field(self._gesture, pointer_x, pointer_y, self.policy)
		current = self.collection.get(self._gesture.field_id)
		updated = current.with_geometry(moved.x, moved.y, moved.width, moved.height)
		self.collection.replace(updated)
		return updated

	def end_gesture(self) -> None:
		self._gesture = None

	def cancel_gesture(self) -> None:
		# every frame already committed a valid state, nothing to roll back
		self._gesture = None

	def handle_event(self, event: PointerEvent) -> EngineState:
		"""
		Dispatch one pointer event and return the resulting state.
		"""
		if event.kind == "down":
			if event.field_id is None:
				if self._gesture is None:
					self.selected_id = None
				return self.state
			self.begin_gesture(
				event.field_id,
				event.action,
				event.x,
				event.y,
				event.page_width,
				event.page_height,
			)
		elif event.kind == "move":
			self.pointer_move(event.x, event.y)
		elif event.kind == "up":
			self.end_gesture()
		elif event.kind == "cancel":
			self.cancel_gesture()
		else:
			raise InvalidInputError(f"unknown pointer event kind: {event.kind!r}")
		return self.state
