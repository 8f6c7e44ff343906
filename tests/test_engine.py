"""Tests for the GameEngine module."""

import json

import pytest

from portfolio_snake.clock import Difficulty
from portfolio_snake.config import GameConfig
from portfolio_snake.engine import GameEngine, GameState
from portfolio_snake.errors import ConfigurationError
from portfolio_snake.interfaces import RecordingRenderer
from portfolio_snake.persistence import MemoryHighScoreStore
from portfolio_snake.snake import Cell, Direction, Snake


def _engine(**kwargs) -> GameEngine:
    """A 10x10 grid engine (200x200 px, 20 px cells)."""
    kwargs.setdefault("seed", 0)
    return GameEngine(width=200, height=200, cell_size=20, **kwargs)


def _started(**kwargs) -> GameEngine:
    engine = _engine(**kwargs)
    engine.start()
    # Park the food well away from the snake's path.
    engine.food = Cell(1, 8)
    return engine


def _feed_ahead(engine: GameEngine) -> None:
    engine.food = engine.snake.next_head()


class TestEngineInit:
    def test_starts_in_menu(self):
        engine = _engine()
        assert engine.state is GameState.MENU
        assert engine.snake is None
        assert engine.score == 0
        assert engine.level == 1

    def test_grid_from_area(self):
        engine = GameEngine(width=500, height=260, cell_size=20)
        assert (engine.grid.tiles_x, engine.grid.tiles_y) == (25, 13)

    def test_area_too_small(self):
        with pytest.raises(ConfigurationError):
            GameEngine(width=50, height=200, cell_size=20)

    def test_bad_cell_size(self):
        with pytest.raises(ConfigurationError):
            GameEngine(width=200, height=200, cell_size=0)

    def test_high_score_loaded_once(self):
        store = MemoryHighScoreStore(initial=12)
        engine = _engine(store=store)
        assert engine.high_score == 12

    def test_from_config(self, tmp_path):
        config = GameConfig(
            width=300, height=200, cell_size=10, difficulty="hard", seed=3,
            high_score_path=str(tmp_path / "hs.json"),
        )
        engine = GameEngine.from_config(config)
        assert (engine.grid.tiles_x, engine.grid.tiles_y) == (30, 20)
        assert engine.difficulty is Difficulty.HARD
        assert engine.high_score == 0


class TestEngineStart:
    def test_start_resets_session(self):
        engine = _engine()
        assert engine.start()
        assert engine.state is GameState.PLAYING
        assert list(engine.snake.segments) == [(5, 5), (4, 5), (3, 5)]
        assert engine.snake.direction is Direction.RIGHT
        assert engine.score == 0
        assert engine.level == 1
        assert engine.pending_direction is None

    def test_food_not_on_snake(self):
        engine = _engine()
        engine.start()
        assert engine.food is not None
        assert not engine.snake.occupies(engine.food)

    def test_smallest_grid_spawns_in_bounds(self):
        engine = GameEngine(width=60, height=60, cell_size=20, seed=0)
        engine.start()
        assert all(engine.grid.in_bounds(c) for c in engine.snake.segments)
        assert engine.food is not None

    def test_start_only_from_menu(self):
        engine = _started()
        assert not engine.start()

    def test_uses_resized_area(self):
        engine = _engine()
        assert engine.resize(400, 300)
        engine.start()
        assert (engine.grid.tiles_x, engine.grid.tiles_y) == (20, 15)

    def test_resize_rejected_while_playing(self):
        engine = _started()
        assert not engine.resize(400, 300)

    def test_resize_too_small(self):
        engine = _engine()
        with pytest.raises(ConfigurationError):
            engine.resize(40, 40)


class TestEngineMovement:
    def test_tick_without_input(self):
        engine = _started()
        snap = engine.step()
        assert list(engine.snake.segments) == [(6, 5), (5, 5), (4, 5)]
        assert snap.snake == ((6, 5), (5, 5), (4, 5))
        assert snap.tick == 1

    def test_direction_change(self):
        engine = _started()
        assert engine.set_direction(Direction.UP)
        engine.step()
        assert engine.snake.head == (5, 4)
        assert engine.pending_direction is None

    def test_reverse_input_discarded(self):
        engine = _started()
        assert not engine.set_direction(Direction.LEFT)
        engine.step()
        assert engine.snake.head == (6, 5)
        assert engine.snake.direction is Direction.RIGHT

    def test_reverse_in_buffer_discarded_at_tick(self):
        engine = _started()
        engine._pending_direction = Direction.LEFT
        engine.step()
        assert engine.snake.head == (6, 5)
        assert engine.pending_direction is None

    def test_single_segment_may_reverse(self):
        engine = _started()
        engine.snake = Snake([(5, 5)], Direction.RIGHT)
        assert engine.set_direction(Direction.LEFT)
        engine.step()
        assert engine.snake.head == (4, 5)

    def test_last_input_before_tick_wins(self):
        engine = _started()
        engine.set_direction(Direction.UP)
        engine.set_direction(Direction.DOWN)
        engine.step()
        assert engine.snake.head == (5, 6)

    def test_same_direction_is_noop(self):
        engine = _started()
        assert not engine.set_direction(Direction.RIGHT)
        assert engine.pending_direction is None

    def test_input_ignored_outside_playing(self):
        engine = _engine()
        assert not engine.set_direction(Direction.UP)
        engine.start()
        engine.pause()
        assert not engine.set_direction(Direction.UP)

    def test_step_outside_playing_does_nothing(self):
        engine = _started()
        engine.pause()
        before = engine.snapshot()
        after = engine.step()
        assert before == after

    def test_length_constant_without_food(self):
        engine = _started()
        for _ in range(3):
            before = len(engine.snake)
            engine.step()
            assert len(engine.snake) == before


class TestEngineWallCollision:
    def test_left_edge(self):
        engine = _started()
        engine.snake = Snake([(0, 5), (1, 5), (2, 5)], Direction.LEFT)
        engine.step()
        assert engine.state is GameState.GAME_OVER
        assert list(engine.snake.segments) == [(0, 5), (1, 5), (2, 5)]

    def test_runs_into_right_wall(self):
        engine = _started()
        for _ in range(20):
            engine.step()
            if engine.state is GameState.GAME_OVER:
                break
        assert engine.state is GameState.GAME_OVER
        assert engine.snake.head == (9, 5)
        assert engine.tick == 4

    def test_head_in_bounds_while_playing(self):
        engine = _started()
        engine.set_direction(Direction.DOWN)
        while engine.state is GameState.PLAYING:
            assert engine.grid.in_bounds(engine.snake.head)
            engine.step()
        assert engine.state is GameState.GAME_OVER


class TestEngineSelfCollision:
    def test_dies_on_self_collision(self):
        engine = _started()
        for _ in range(3):
            _feed_ahead(engine)
            engine.step()
        engine.food = Cell(1, 8)
        assert len(engine.snake) == 6
        for direction in (Direction.DOWN, Direction.LEFT, Direction.UP):
            engine.set_direction(direction)
            engine.step()
        assert engine.state is GameState.GAME_OVER

    def test_chasing_own_tail_is_safe(self):
        engine = _started()
        engine.snake = Snake(
            [(4, 4), (5, 4), (5, 5), (4, 5)], Direction.LEFT,
        )
        cycle = [Direction.DOWN, Direction.RIGHT, Direction.UP, Direction.LEFT]
        for direction in cycle * 3:
            engine.set_direction(direction)
            engine.step()
            assert engine.state is GameState.PLAYING
        assert len(engine.snake) == 4

    def test_straight_line_never_collides(self):
        engine = _started()
        engine.snake = Snake.spawn(Cell(5, 1), Direction.DOWN, length=2)
        for _ in range(len(engine.snake)):
            engine.step()
        assert engine.state is GameState.PLAYING

    def test_growing_into_tail_collides(self):
        engine = _started()
        engine.snake = Snake(
            [(4, 4), (5, 4), (5, 5), (4, 5)], Direction.LEFT,
        )
        engine.food = Cell(4, 5)
        engine.set_direction(Direction.DOWN)
        engine.step()
        assert engine.state is GameState.GAME_OVER


class TestEngineFood:
    def test_eating_scores_and_grows(self):
        engine = _started()
        engine.step()
        engine.food = Cell(7, 5)
        engine.step()
        assert engine.score == 1
        assert engine.level == 1
        assert len(engine.snake) == 4
        assert engine.snake.tail == (4, 5)
        assert engine.food is not None
        assert not engine.snake.occupies(engine.food)

    def test_level_follows_score(self):
        engine = GameEngine(width=400, height=400, cell_size=20, seed=0)
        engine.start()
        for expected in range(1, 8):
            _feed_ahead(engine)
            engine.step()
            assert engine.state is GameState.PLAYING
            assert engine.score == expected
            assert engine.level == expected // 5 + 1

    def test_level_speeds_up_clock(self):
        engine = _started(difficulty=Difficulty.HARD)
        engine.score = 4
        _feed_ahead(engine)
        engine.step()
        assert engine.level == 2
        assert engine.clock.interval == 38

    def test_filling_board_wins(self):
        store = MemoryHighScoreStore()
        engine = GameEngine(width=60, height=60, cell_size=20, store=store, seed=0)
        engine.start()
        engine.snake = Snake(
            [(0, 1), (0, 2), (1, 2), (2, 2), (2, 1), (1, 1), (1, 0), (2, 0)],
            Direction.UP,
        )
        engine.food = Cell(0, 0)
        engine.step()
        assert engine.state is GameState.WON
        assert engine.food is None
        assert len(engine.snake) == 9
        assert engine.score == 1
        assert engine.high_score == 1
        assert store.saves == 1


class TestEngineHighScore:
    def test_game_over_records_high_score(self):
        store = MemoryHighScoreStore(initial=0)
        engine = _started(store=store)
        _feed_ahead(engine)
        engine.step()
        engine.food = Cell(1, 8)
        while engine.state is GameState.PLAYING:
            engine.step()
        assert engine.high_score == 1
        assert store.value == 1
        assert store.saves == 1

    def test_lower_score_keeps_high_score(self):
        store = MemoryHighScoreStore(initial=10)
        engine = _started(store=store)
        _feed_ahead(engine)
        engine.step()
        engine.food = Cell(1, 8)
        while engine.state is GameState.PLAYING:
            engine.step()
        assert engine.high_score == 10
        assert store.saves == 0

    def test_shared_store_never_lowered(self):
        store = MemoryHighScoreStore(initial=0)
        first = _started(store=store)
        second = _started(store=store)

        # The second engine sets a record of 2 first.
        for _ in range(2):
            _feed_ahead(second)
            second.step()
        second.food = Cell(1, 8)
        while second.state is GameState.PLAYING:
            second.step()
        assert store.value == 2

        # The first engine, built when the record was 0, scores only 1.
        _feed_ahead(first)
        first.step()
        first.food = Cell(1, 8)
        while first.state is GameState.PLAYING:
            first.step()
        assert first.score == 1
        assert store.value == 2
        assert store.saves == 1
        assert first.high_score == 2

    def test_equal_score_not_saved(self):
        store = MemoryHighScoreStore(initial=0)
        engine = _started(store=store)
        while engine.state is GameState.PLAYING:
            engine.step()
        assert store.saves == 0


class TestEngineStateMachine:
    def test_pause_is_idempotent(self):
        engine = _started()
        assert engine.pause()
        first = engine.snapshot()
        assert not engine.pause()
        assert engine.snapshot() == first
        assert engine.state is GameState.PAUSED

    def test_resume(self):
        engine = _started()
        engine.pause()
        assert engine.resume()
        assert engine.state is GameState.PLAYING

    def test_toggle_pause(self):
        engine = _started()
        assert engine.toggle_pause()
        assert engine.state is GameState.PAUSED
        assert engine.toggle_pause()
        assert engine.state is GameState.PLAYING

    def test_invalid_transitions_are_noops(self):
        engine = _engine()
        assert not engine.pause()
        assert not engine.resume()
        assert not engine.restart()
        assert not engine.toggle_pause()
        assert not engine.close()
        assert engine.state is GameState.MENU

    def test_restart_after_game_over(self):
        engine = _started()
        _feed_ahead(engine)
        engine.step()
        engine.food = Cell(1, 8)
        while engine.state is GameState.PLAYING:
            engine.step()
        assert engine.restart()
        assert engine.state is GameState.PLAYING
        assert engine.score == 0
        assert engine.level == 1
        assert engine.tick == 0
        assert len(engine.snake) == 3

    def test_restart_not_allowed_while_playing(self):
        engine = _started()
        assert not engine.restart()

    def test_close_from_any_state(self):
        engine = _started()
        engine.pause()
        assert engine.close()
        assert engine.state is GameState.MENU
        assert engine.snake is None
        assert engine.food is None

    def test_difficulty_fixed_during_session(self):
        engine = _started()
        assert not engine.select_difficulty(Difficulty.HARD)
        assert engine.difficulty is Difficulty.NORMAL
        engine.close()
        assert engine.select_difficulty("hard")
        engine.start()
        assert engine.clock.interval == 40


class TestEngineClockGating:
    def test_update_ticks_on_interval(self):
        engine = _started()
        assert not engine.update(1_000)
        assert not engine.update(1_050)
        assert engine.update(1_081)
        assert engine.tick == 1
        assert not engine.update(1_100)

    def test_update_outside_playing_never_ticks(self):
        engine = _engine()
        assert not engine.update(0)
        assert not engine.update(10_000)

    def test_resume_ignores_paused_gap(self):
        engine = _started()
        engine.update(0)
        engine.update(81)
        engine.pause()
        engine.update(60_000)
        engine.resume()
        assert not engine.update(60_001)
        assert engine.tick == 1
        assert engine.update(60_082)
        assert engine.tick == 2

    def test_hard_intervals(self):
        engine = _engine(difficulty=Difficulty.HARD)
        engine.start()
        assert engine.clock.interval == 40
        engine.clock.set_level(6)
        assert engine.clock.interval == 30


class TestEngineRendering:
    def test_tick_publishes_snapshot(self):
        renderer = RecordingRenderer()
        engine = _started(renderer=renderer)
        renderer.fields.clear()
        engine.step()
        assert renderer.last.tick == 1
        assert renderer.last.snake[0] == (6, 5)

    def test_every_update_redraws(self):
        renderer = RecordingRenderer()
        engine = _started(renderer=renderer)
        renderer.fields.clear()
        for t in (0, 10, 20, 30):
            engine.update(t)
        assert len(renderer.fields) == 4
        assert all(s.tick == 0 for s in renderer.fields)

    def test_overlay_drawn_when_paused(self):
        renderer = RecordingRenderer()
        engine = _started(renderer=renderer)
        engine.pause()
        assert renderer.overlays[-1].state is GameState.PAUSED

    def test_runs_headless_without_renderer(self):
        engine = _started()
        while engine.state is GameState.PLAYING:
            engine.step()
        assert engine.state is GameState.GAME_OVER


class TestEngineSerialization:
    def test_state_is_json_serializable(self):
        engine = _started()
        engine.step()
        serialized = json.dumps(engine.get_state())
        assert isinstance(serialized, str)

    def test_state_structure(self):
        state = _started().get_state()
        assert state["state"] == "playing"
        assert state["grid"] == {"tiles_x": 10, "tiles_y": 10, "cell_size": 20}
        assert state["snake"][0] == [5, 5]
        assert state["food"] == [1, 8]
        assert state["difficulty"] == "normal"
        assert state["interval"] == 80

    def test_menu_state(self):
        state = _engine().get_state()
        assert state["snake"] == []
        assert state["food"] is None


class TestEngineDeterminism:
    def test_same_seed_same_outcome(self):
        actions = [
            Direction.UP, Direction.LEFT, Direction.DOWN, Direction.DOWN,
        ]
        assert self._run(123, actions) == self._run(123, actions)

    def test_different_seeds_differ(self):
        foods = {self._run(seed, [])["food"] for seed in range(5)}
        assert len(foods) > 1

    @staticmethod
    def _run(seed: int, actions: list[Direction]) -> dict:
        engine = GameEngine(width=400, height=400, cell_size=20, seed=seed)
        engine.start()
        for action in actions:
            engine.set_direction(action)
            engine.step()
        state = engine.get_state()
        state["food"] = tuple(state["food"])
        return state
