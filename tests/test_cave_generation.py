"""
Tests for cave generation and scrolling.
"""

import pytest

from flappy_dragon.cave_core.config_loader import load_config
from flappy_dragon.cave_core.cave import Cave
from flappy_dragon.cave_core.rng import TerrainRng
from flappy_dragon.cave_core.tiles import Tile


class ScriptedRng:
    """Returns magnitudes from a fixed list, repeating the last one."""

    def __init__(self, values):
        self._values = list(values)
        self._index = 0

    def draw_magnitude(self):
        value = self._values[min(self._index, len(self._values) - 1)]
        self._index += 1
        return value


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def cave(config):
    return Cave(config, seed=42)


def boundary_walls_intact(cave):
    last_row = cave.rows - 1
    return all(
        cave.grid.get(0, col) == Tile.WALL and cave.grid.get(last_row, col) == Tile.WALL
        for col in range(cave.cols)
    )


class TestInitialize:
    """Test initial cave layout."""

    def test_dimensions_follow_screen(self, cave, config):
        """Grid covers the screen height and one screen width plus a column."""
        assert cave.rows == config.screen.height // config.screen.tile_size
        assert cave.cols == config.screen.width // config.screen.tile_size + 1

    def test_ceiling_and_floor_are_walls(self, cave):
        """Row 0 and the last row are walls everywhere."""
        assert boundary_walls_intact(cave)

    def test_interior_is_empty(self, cave):
        """Every interior cell starts empty."""
        for col in range(cave.cols):
            assert cave.column_wall_count(col) == 2

    def test_cursor_and_timestamp_start_at_zero(self, cave):
        """Front column and last scroll time start at zero."""
        assert cave.front_column == 0
        assert cave.last_scroll_ms == 0


class TestScrollTiming:
    """Test the scroll interval gate."""

    def test_before_interval_is_noop(self, config):
        """One millisecond early does nothing."""
        cave = Cave(config, rng=ScriptedRng([5]))
        interval = cave.scroll_interval_ms
        cells_before = cave.grid.as_array().copy()

        assert cave.scroll(interval - 1) is False
        assert cave.front_column == 0
        assert cave.last_scroll_ms == 0
        assert (cave.grid.as_array() == cells_before).all()

    def test_at_interval_fires(self, config):
        """Exactly one interval later a scroll fires and records the time."""
        cave = Cave(config, rng=ScriptedRng([0]))
        interval = cave.scroll_interval_ms

        assert cave.scroll(interval) is True
        assert cave.last_scroll_ms == interval

        # Measured from the new timestamp
        assert cave.scroll(2 * interval - 1) is False
        assert cave.scroll(2 * interval) is True
        assert cave.last_scroll_ms == 2 * interval

    def test_one_advance_per_tick(self, config):
        """A long gap still advances only one column."""
        cave = Cave(config, rng=ScriptedRng([0]))
        cave.scroll(cave.scroll_interval_ms * 10)
        assert cave.front_column == 1


class TestWraparound:
    """Test the circular column cursor."""

    def test_cycles_through_every_column(self, cave):
        """front_column visits exactly cols distinct values before repeating."""
        interval = cave.scroll_interval_ms
        seen = []
        for i in range(1, cave.cols + 1):
            assert cave.scroll(i * interval)
            seen.append(cave.front_column)

        assert len(set(seen)) == cave.cols
        assert seen[-1] == 0

        cave.scroll((cave.cols + 1) * interval)
        assert cave.front_column == seen[0]

    def test_cursor_stays_in_range(self, cave):
        """front_column never leaves [0, cols-1]."""
        interval = cave.scroll_interval_ms
        for i in range(1, cave.cols * 3):
            cave.scroll(i * interval)
            assert 0 <= cave.front_column < cave.cols

    def test_generation_target_trails_front(self, config):
        """The column behind the front is regenerated; fronts 0 and 1 use the last column."""
        # Stalactite of 5 every time makes regenerated columns visible
        cave = Cave(config, rng=ScriptedRng([5, 0]))
        interval = cave.scroll_interval_ms
        last = cave.last_column_index

        cave.scroll(interval)  # front 0 -> target last
        assert cave.column_wall_count(last) == 7

        cave2 = Cave(config, rng=ScriptedRng([0, 0, 0, 0, 5, 0]))
        cave2.scroll(interval)      # front 0 -> target last
        cave2.scroll(2 * interval)  # front 1 -> target last
        cave2.scroll(3 * interval)  # front 2 -> target 1
        assert cave2.column_wall_count(1) == 7
        assert cave2.front_column == 3

    def test_visible_columns_start_at_front(self, cave):
        """Wraparound order begins at the front column and covers every column."""
        interval = cave.scroll_interval_ms
        for i in range(1, 6):
            cave.scroll(i * interval)

        order = list(cave.visible_columns())
        assert order[0] == cave.front_column
        assert sorted(order) == list(range(cave.cols))
        assert order[1] == (cave.front_column + 1) % cave.cols


class TestCarving:
    """Test stalactite and stalagmite generation."""

    def test_exact_geometry(self, config):
        """Visible magnitudes carve from the ceiling down and the floor up."""
        cave = Cave(config, rng=ScriptedRng([5, 3]))
        cave.scroll(cave.scroll_interval_ms)
        col = cave.last_column_index
        floor = cave.rows - 1

        for row in range(cave.rows):
            expected = row == 0 or row == floor or 1 <= row <= 5 or floor - 3 <= row < floor
            assert (cave.grid.get(row, col) == Tile.WALL) == expected, row

        assert cave.column_wall_count(col) == 2 + 5 + 3

    @pytest.mark.parametrize("magnitude,carved", [
        (0, 0),
        (2, 0),
        (3, 3),
        (8, 8),
        (9, 0),
        (63, 0),
    ])
    def test_visible_range(self, config, magnitude, carved):
        """Only magnitudes in (2, 8] are carved."""
        cave = Cave(config, rng=ScriptedRng([magnitude, 0]))
        cave.scroll(cave.scroll_interval_ms)
        assert cave.column_wall_count(cave.last_column_index) == 2 + carved

    def test_regeneration_clears_old_terrain(self, config):
        """Reusing a column wipes its previous protrusions."""
        cave = Cave(config, rng=ScriptedRng([8, 8, 0]))
        interval = cave.scroll_interval_ms
        last = cave.last_column_index

        cave.scroll(interval)
        assert cave.column_wall_count(last) == 18
        cave.scroll(2 * interval)
        assert cave.column_wall_count(last) == 2

    def test_boundary_invariant_after_every_scroll(self, cave):
        """Ceiling and floor survive many random scrolls."""
        interval = cave.scroll_interval_ms
        for i in range(1, 200):
            cave.scroll(i * interval)
            assert boundary_walls_intact(cave)

    def test_seed_is_deterministic(self, config):
        """Same seed, same terrain."""
        a = Cave(config, seed=7)
        b = Cave(config, seed=7)
        for i in range(1, 100):
            a.scroll(i * a.scroll_interval_ms)
            b.scroll(i * b.scroll_interval_ms)
        assert (a.grid.as_array() == b.grid.as_array()).all()

    def test_reset_restores_initial_layout(self, cave):
        """reset() empties the interior and rewinds the cursor."""
        for i in range(1, 50):
            cave.scroll(i * cave.scroll_interval_ms)
        cave.reset()
        assert cave.front_column == 0
        assert cave.last_scroll_ms == 0
        assert all(cave.column_wall_count(c) == 2 for c in range(cave.cols))


class TestOpeningCenter:
    """Test vertical opening center."""

    def test_open_column_uses_span_midpoint(self, cave):
        """An empty column's center lies midway between the boundary walls."""
        assert cave.vertical_opening_center(0) == (1 + cave.rows - 2) // 2

    def test_protrusions_shift_center(self, cave):
        """A stalactite pushes the opening center down."""
        for row in range(1, 9):
            cave.grid.set(row, 0, Tile.WALL)
        assert cave.vertical_opening_center(0) == (9 + cave.rows - 2) // 2

    def test_single_empty_row(self, cave):
        """With one gap the center is that row."""
        cave.grid.set_column(0, Tile.WALL)
        cave.grid.set(11, 0, Tile.EMPTY)
        assert cave.vertical_opening_center(0) == 11

    def test_solid_column_uses_grid_center(self, cave):
        """A fully walled column falls back to the grid's middle."""
        cave.grid.set_column(0, Tile.WALL)
        assert cave.vertical_opening_center(0) == cave.rows // 2


class TestRenderContract:
    """Test wall rectangles and slide interpolation."""

    def test_one_rect_per_wall(self, cave, config):
        """Every wall cell produces one tile-sized rectangle."""
        rects = cave.wall_rects(0, sliding=False)
        assert len(rects) == 2 * cave.cols
        tile = config.tile_size
        assert all(r.width == tile and r.height == tile for r in rects)
        assert all(r.color == config.colors.wall for r in rects)

    def test_static_rects_align_to_grid(self, cave, config):
        """Without sliding, x positions are whole tile multiples in on-screen order."""
        tile = config.tile_size
        rects = cave.wall_rects(0, sliding=False)
        xs = sorted({r.x for r in rects})
        assert xs == [i * tile for i in range(cave.cols)]

    def test_slide_offset_grows_between_ticks(self, cave, config):
        """Half an interval after a scroll the terrain has moved half a tile."""
        interval = cave.scroll_interval_ms
        cave.scroll(interval)
        tile = config.tile_size

        assert cave.slide_offset(interval) == 0
        assert cave.slide_offset(interval + interval // 2) == pytest.approx(tile * (interval // 2) / interval)

        rects = cave.wall_rects(interval + interval // 2, sliding=True)
        assert min(r.x for r in rects) == pytest.approx(-cave.slide_offset(interval + interval // 2))

    def test_slide_offset_is_clamped(self, cave, config):
        """The offset never exceeds one tile."""
        assert cave.slide_offset(10 ** 6) == config.tile_size


class TestTerrainRng:
    """Test the seedable magnitude source."""

    def test_range(self, config):
        """Draws stay inside [0, magnitude_upper)."""
        rng = TerrainRng(config, seed=3)
        draws = [rng.draw_magnitude() for _ in range(2000)]
        assert min(draws) >= 0
        assert max(draws) < config.cave.magnitude_upper

    def test_reset_replays_sequence(self, config):
        """Resetting with the same seed replays the draws."""
        rng = TerrainRng(config, seed=3)
        first = [rng.draw_magnitude() for _ in range(20)]
        state = TerrainRng(config, seed=3).get_state()
        rng.reset(3)
        assert rng.get_state() == state
        assert [rng.draw_magnitude() for _ in range(20)] == first
        assert rng.seed == 3

    def test_cave_reset_reseeds(self, config):
        """Cave.reset(seed) regenerates identical terrain."""
        cave = Cave(config, seed=9)
        for i in range(1, 60):
            cave.scroll(i * cave.scroll_interval_ms)
        snapshot = cave.grid.as_array().copy()

        cave.reset(seed=9)
        for i in range(1, 60):
            cave.scroll(i * cave.scroll_interval_ms)
        assert (cave.grid.as_array() == snapshot).all()


def reference_wall_rects(cave, tile, now_ms, sliding):
    """Cell-by-cell walk of the grid in on-screen order."""
    offset = cave.slide_offset(now_ms) if sliding else 0.0
    cells = cave.grid.as_array()
    expected = []
    for screen_col, col in enumerate(cave.visible_columns()):
        for row in range(cave.rows):
            if int(cells[row, col]) == int(Tile.WALL):
                expected.append((screen_col * tile - offset, row * tile))
    return expected


class TestWallRectLayout:
    """Test the rect list against a cell-by-cell walk."""

    @pytest.mark.parametrize("sliding", [False, True])
    def test_matches_cell_walk(self, config, sliding):
        """Rects come out column by column, top to bottom, at the same positions."""
        cave = Cave(config, seed=21)
        interval = cave.scroll_interval_ms
        for i in range(1, 3 * cave.cols):
            cave.scroll(i * interval)
        now = cave.last_scroll_ms + interval // 3

        rects = cave.wall_rects(now, sliding=sliding)
        expected = reference_wall_rects(cave, config.tile_size, now, sliding)
        assert [(r.x, r.y) for r in rects] == expected
        assert all(r.width == config.tile_size for r in rects)

    def test_front_column_drawn_first(self, config):
        """The first rects belong to the front column at screen x 0."""
        cave = Cave(config, rng=ScriptedRng([5, 0]))
        for i in range(1, 8):
            cave.scroll(i * cave.scroll_interval_ms)

        rects = cave.wall_rects(0, sliding=False)
        first_col = [r for r in rects if r.x == 0]
        assert rects[:len(first_col)] == first_col
        assert len(first_col) == cave.column_wall_count(cave.front_column)


class TestColumnZeroReuse:
    """Test that the generation target skips column 0."""

    def test_column_zero_never_regenerated(self, config):
        """Fronts 0 and 1 both target the last column, so column 0 keeps its initial layout."""
        cave = Cave(config, rng=ScriptedRng([5]))
        interval = cave.scroll_interval_ms
        for i in range(1, 3 * cave.cols + 1):
            cave.scroll(i * interval)

        assert cave.column_wall_count(0) == 2
        for col in range(1, cave.cols):
            assert cave.column_wall_count(col) == 12, col
