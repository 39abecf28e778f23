import sys
from pathlib import Path

# Add the project root (one level up from 'test') to sys.path
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from HanziHandwriting.services.drawing.surface import DrawingSurface
from HanziHandwriting.services.normalize.normalizer import find_bounds


def draw_line(surface, start, end, steps=10):
    surface.begin_stroke(start)
    for i in range(1, steps + 1):
        t = i / steps
        surface.extend_stroke((start[0] + (end[0] - start[0]) * t, start[1] + (end[1] - start[1]) * t))
    surface.end_stroke()


def test_new_surface_is_empty():
    surface = DrawingSurface(200, 150)
    assert not surface.has_content()
    assert surface.snapshot().size == (200, 150)
    assert surface.snapshot().mode == 'RGBA'
    assert surface.strokes == ()


def test_horizontal_stroke_marks_raster():
    surface = DrawingSurface(400, 400, stroke_width=8)
    draw_line(surface, (50, 100), (300, 100))
    assert surface.has_content()
    box = find_bounds(surface.snapshot())
    assert box is not None
    assert box.min_x <= 50 and box.max_x >= 300
    # round caps extend by half the stroke width at most
    assert box.min_x >= 50 - 5 and box.max_x <= 300 + 5
    assert 6 <= box.height <= 10


def test_extend_without_begin_is_noop():
    surface = DrawingSurface()
    surface.extend_stroke((10, 10))
    surface.extend_stroke((100, 100))
    assert not surface.has_content()
    assert surface.last_point is None


def test_click_without_move_records_stroke_but_no_ink():
    surface = DrawingSurface()
    surface.begin_stroke((20, 20))
    surface.end_stroke()
    assert not surface.has_content()
    assert len(surface.strokes) == 1
    assert surface.strokes[0].points == ((20.0, 20.0),)


def test_begin_while_drawing_keeps_the_unfinished_stroke():
    surface = DrawingSurface()
    surface.begin_stroke((10, 10))
    surface.extend_stroke((60, 10))
    # no release between the two strokes, e.g. the pointer left the canvas
    surface.begin_stroke((10, 100))
    surface.extend_stroke((60, 100))
    surface.end_stroke()
    assert [s.points for s in surface.strokes] == [
        ((10.0, 10.0), (60.0, 10.0)),
        ((10.0, 100.0), (60.0, 100.0)),
    ]
    assert surface.has_content()


def test_resize_drops_the_active_stroke():
    surface = DrawingSurface()
    surface.begin_stroke((10, 10))
    surface.resize(200, 200)
    assert not surface.is_drawing
    assert surface.last_point is None
    surface.end_stroke()
    assert surface.strokes == ()


def test_end_stroke_is_idempotent():
    surface = DrawingSurface()
    draw_line(surface, (10, 10), (50, 50), steps=3)
    surface.end_stroke()
    surface.end_stroke()
    assert len(surface.strokes) == 1
    assert len(surface.strokes[0]) == 4
    assert not surface.is_drawing
    # extending after release does nothing
    before = surface.snapshot().tobytes()
    surface.extend_stroke((300, 300))
    assert surface.snapshot().tobytes() == before


def test_points_are_clamped_to_raster():
    surface = DrawingSurface(100, 80)
    surface.begin_stroke((-20, 40))
    assert surface.last_point == (0.0, 40.0)
    surface.extend_stroke((1000, -50))
    assert surface.last_point == (99.0, 0.0)
    surface.end_stroke()
    assert surface.has_content()


def test_malformed_points_are_ignored():
    surface = DrawingSurface()
    surface.begin_stroke(('a', None))
    assert not surface.is_drawing
    surface.begin_stroke((10, 10))
    surface.extend_stroke((float('nan'), 5))
    surface.extend_stroke((float('inf'), 5))
    surface.extend_stroke(None)
    surface.extend_stroke((3,))
    assert surface.last_point == (10.0, 10.0)
    assert not surface.has_content()


def test_clear_resets_raster_and_history():
    surface = DrawingSurface()
    draw_line(surface, (10, 10), (200, 200))
    assert surface.has_content()
    surface.clear()
    assert not surface.has_content()
    assert surface.strokes == ()
    assert surface.last_point is None
    assert find_bounds(surface.snapshot()) is None


def test_snapshot_is_detached_copy():
    surface = DrawingSurface(50, 50)
    snap = surface.snapshot()
    snap.putpixel((10, 10), (0, 0, 0, 255))
    assert not surface.has_content()


def test_resize_discards_drawing():
    surface = DrawingSurface(100, 100)
    draw_line(surface, (10, 10), (90, 90))
    surface.resize(300, 200)
    assert surface.snapshot().size == (300, 200)
    assert not surface.has_content()
    assert surface.strokes == ()


def test_multiple_strokes_are_kept_in_order():
    surface = DrawingSurface()
    draw_line(surface, (10, 10), (100, 10), steps=2)
    draw_line(surface, (10, 50), (100, 50), steps=5)
    assert [len(s) for s in surface.strokes] == [3, 6]
    assert surface.strokes[1].bbox == (10.0, 50.0, 100.0, 50.0)
