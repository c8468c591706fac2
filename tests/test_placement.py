import math
import random

import pytest

import pdf_field_overlay.config
import pdf_field_overlay.errors
import pdf_field_overlay.fields as fields
import pdf_field_overlay.placement as placement


PAGE_PIXELS = (800.0, 1000.0)


#============================================
def build_engine(clamp_resize: bool = False) -> tuple[placement.PlacementEngine, fields.Field]:
	"""
	Build an engine with one Text field at the default position.
	"""
	collection = fields.FieldCollection()
	policy = pdf_field_overlay.config.PlacementPolicy(clamp_resize=clamp_resize)
	engine = placement.PlacementEngine(collection, policy)
	field = engine.add_field("Text")
	return engine, field


#============================================
def test_move_converts_pixels_to_percent() -> None:
	engine, field = build_engine()
	assert engine.begin_gesture(field.id, "move", 100.0, 100.0, *PAGE_PIXELS)
	assert engine.state == placement.EngineState.DRAGGING
	moved = engine.pointer_move(180.0, 150.0)
	assert math.isclose(moved.x, 35.0 + 10.0)
	assert math.isclose(moved.y, 10.0 + 5.0)
	assert (moved.width, moved.height) == (field.width, field.height)
	engine.end_gesture()
	assert engine.state == placement.EngineState.IDLE
	assert engine.collection.get(field.id) == moved


#============================================
def test_move_clamps_to_page() -> None:
	engine, field = build_engine()
	engine.begin_gesture(field.id, "move", 0.0, 0.0, *PAGE_PIXELS)
	far = engine.pointer_move(10000.0, 10000.0)
	assert math.isclose(far.x, 100.0 - field.width)
	assert math.isclose(far.y, 100.0 - field.height)
	near = engine.pointer_move(-10000.0, -10000.0)
	assert (near.x, near.y) == (0.0, 0.0)


#============================================
def test_deltas_are_relative_to_gesture_start() -> None:
	"""
	Each frame applies the total delta to the pre-gesture geometry.
	"""
	engine, field = build_engine()
	engine.begin_gesture(field.id, "move", 0.0, 0.0, *PAGE_PIXELS)
	engine.pointer_move(80.0, 0.0)
	engine.pointer_move(80.0, 0.0)
	current = engine.pointer_move(80.0, 0.0)
	assert math.isclose(current.x, field.x + 10.0)


#============================================
def test_resize_floors() -> None:
	engine, field = build_engine()
	engine.begin_gesture(field.id, "resize", 500.0, 500.0, *PAGE_PIXELS)
	shrunk = engine.pointer_move(-5000.0, -5000.0)
	assert shrunk.width == 5.0
	assert shrunk.height == 2.0
	assert (shrunk.x, shrunk.y) == (field.x, field.y)


#============================================
def test_resize_overflows_without_clamp_policy() -> None:
	"""
	Resizing may pass the page edge unless clamp_resize is set.
	"""
	engine, field = build_engine(clamp_resize=False)
	engine.begin_gesture(field.id, "resize", 0.0, 0.0, *PAGE_PIXELS)
	grown = engine.pointer_move(800.0, 0.0)
	assert grown.x + grown.width > 100.0

	engine, field = build_engine(clamp_resize=True)
	engine.begin_gesture(field.id, "resize", 0.0, 0.0, *PAGE_PIXELS)
	grown = engine.pointer_move(800.0, 2000.0)
	assert math.isclose(grown.x + grown.width, 100.0)
	assert math.isclose(grown.y + grown.height, 100.0)


#============================================
def test_random_gestures_keep_invariants() -> None:
	"""
	Any sequence of gestures keeps the field on the page and above the floors.
	"""
	rng = random.Random(1234)
	engine, field = build_engine(clamp_resize=True)
	for _ in range(300):
		kind = rng.choice(["move", "resize"])
		page_width = rng.uniform(200.0, 1600.0)
		page_height = rng.uniform(200.0, 1600.0)
		start_x = rng.uniform(0.0, page_width)
		start_y = rng.uniform(0.0, page_height)
		engine.begin_gesture(field.id, kind, start_x, start_y, page_width, page_height)
		for _ in range(rng.randint(1, 5)):
			current = engine.pointer_move(
				start_x + rng.uniform(-2.0, 2.0) * page_width,
				start_y + rng.uniform(-2.0, 2.0) * page_height,
			)
			assert current.width >= 5.0
			assert current.height >= 2.0
			assert 0.0 <= current.x <= 100.0 - current.width + 1e-9
			assert 0.0 <= current.y <= 100.0 - current.height + 1e-9
		if rng.random() < 0.5:
			engine.end_gesture()
		else:
			engine.cancel_gesture()


#============================================
def test_second_pointer_down_is_ignored() -> None:
	engine, field = build_engine()
	other = engine.add_field("Radio")
	assert engine.begin_gesture(field.id, "move", 0.0, 0.0, *PAGE_PIXELS)
	assert not engine.begin_gesture(other.id, "resize", 0.0, 0.0, *PAGE_PIXELS)
	assert engine.gesture.field_id == field.id
	engine.pointer_move(80.0, 0.0)
	assert engine.collection.get(other.id) == other


#============================================
def test_cancel_keeps_last_frame() -> None:
	engine, field = build_engine()
	engine.begin_gesture(field.id, "move", 0.0, 0.0, *PAGE_PIXELS)
	moved = engine.pointer_move(40.0, 0.0)
	engine.cancel_gesture()
	assert engine.collection.get(field.id) == moved
	assert engine.pointer_move(400.0, 0.0) is None


#============================================
def test_handle_event_state_machine() -> None:
	engine, field = build_engine()
	down = placement.PointerEvent("down", 0.0, 0.0, field_id=field.id, action="resize", page_width=800.0, page_height=1000.0)
	assert engine.handle_event(down) == placement.EngineState.DRAGGING
	assert engine.handle_event(placement.PointerEvent("move", 80.0, 100.0)) == placement.EngineState.DRAGGING
	assert engine.handle_event(placement.PointerEvent("up")) == placement.EngineState.IDLE
	resized = engine.collection.get(field.id)
	assert math.isclose(resized.width, field.width + 10.0)
	assert math.isclose(resized.height, field.height + 10.0)

	engine.handle_event(placement.PointerEvent("down"))
	assert engine.selected_id is None
	with pytest.raises(pdf_field_overlay.errors.InvalidInputError):
		engine.handle_event(placement.PointerEvent("wheel"))


#============================================
def test_next_field_is_pure() -> None:
	field = fields.RadioField(id=1, x=10.0, y=10.0, width=5.0, height=3.0, value=True)
	gesture = placement.Gesture(
		field_id=1,
		kind=placement.GestureKind.MOVE,
		start_x=0.0,
		start_y=0.0,
		field=field,
		page_width=100.0,
		page_height=100.0,
	)
	first = placement.next_field(gesture, 5.0, 5.0)
	second = placement.next_field(gesture, 5.0, 5.0)
	assert first == second
	assert (first.x, first.y, first.value) == (15.0, 15.0, True)
	assert gesture.field.x == 10.0


#============================================
def test_editor_commands() -> None:
	engine, field = build_engine()
	radio = engine.add_field("Radio")
	assert engine.selected_id == radio.id
	assert engine.toggle_radio(radio.id).value is True
	assert engine.toggle_radio(radio.id).value is False
	with pytest.raises(pdf_field_overlay.errors.InvalidInputError):
		engine.toggle_radio(field.id)
	assert engine.update_value(field.id, "typed").value == "typed"
	with pytest.raises(pdf_field_overlay.errors.InvalidInputError):
		engine.update_value(radio.id, "not a bool")

	engine.begin_gesture(radio.id, "move", 0.0, 0.0, *PAGE_PIXELS)
	engine.delete_field(radio.id)
	assert engine.state == placement.EngineState.IDLE
	assert engine.selected_id is None
	assert len(engine.collection) == 1


#============================================
def test_begin_gesture_validation() -> None:
	engine, field = build_engine()
	with pytest.raises(pdf_field_overlay.errors.InvalidInputError):
		engine.begin_gesture(field.id, "move", 0.0, 0.0, 0.0, 100.0)
	with pytest.raises(pdf_field_overlay.errors.InvalidInputError):
		engine.begin_gesture(field.id, "rotate", 0.0, 0.0, 100.0, 100.0)
	with pytest.raises(KeyError):
		engine.begin_gesture("missing", "move", 0.0, 0.0, 100.0, 100.0)
	assert engine.state == placement.EngineState.IDLE


#============================================
def test_clamped_resize_pulls_back_field_past_edge() -> None:
	"""
	A field parsed past the right and bottom edges ends up back on the page.
	"""
	collection = fields.FieldCollection([fields.TextField(id=1, x=98.0, y=99.0, width=5.0, height=2.0)])
	policy = pdf_field_overlay.config.PlacementPolicy(clamp_resize=True)
	engine = placement.PlacementEngine(collection, policy)
	engine.begin_gesture(1, "resize", 0.0, 0.0, *PAGE_PIXELS)
	resized = engine.pointer_move(80.0, 100.0)
	assert resized.width >= 5.0
	assert resized.height >= 2.0
	assert resized.x + resized.width <= 100.0 + 1e-9
	assert resized.y + resized.height <= 100.0 + 1e-9
