import json

from esper import World

from flood.ai.solver import solve
from flood.components.game_color import GameColor
from flood.components.game_session import GameStatus
from flood.components.progress_tracker import DailyResult
from flood.constants import DAILY_STORE_KEY_PREFIX, PROGRESS_STORE_KEY
from flood.events.bus import EVENT_DAILY_COMPLETED, EVENT_LEVEL_COMPLETED, EventBus
from flood.game import FloodGame
from flood.systems.progress_system import ProgressSystem
from flood.utils.json_store import JsonFileStore
from tests.helpers import capture_events


def _progress(store=None):
    bus = EventBus()
    return ProgressSystem(World(), bus, store=store), bus


def test_level_results_keep_the_best():
    progress, bus = _progress()
    completed = capture_events(bus, EVENT_LEVEL_COMPLETED)
    progress.record_level_result(3, 2, 500)
    progress.record_level_result(3, 1, 900)
    assert progress.stars_for(3) == 2
    assert progress.tracker().best_scores[3] == 900
    assert progress.tracker().highest_unlocked_level == 4
    assert progress.total_stars == 2
    assert len(completed) == 2


def test_unlock_never_goes_past_the_last_level():
    progress, _ = _progress()
    progress.record_level_result(100, 3, 10)
    assert progress.tracker().highest_unlocked_level == 100
    progress.record_level_result(5, 1, 10)
    assert progress.tracker().highest_unlocked_level == 100


def test_progress_round_trips_through_json_file(tmp_path):
    path = tmp_path / "save" / "progress.json"
    progress, _ = _progress(JsonFileStore(path))
    progress.record_level_result(1, 3, 1200)
    progress.record_daily_result(DailyResult("2026-03-15", 12, 16, 3, [GameColor.AMBER]))

    on_disk = json.loads(path.read_text())
    assert PROGRESS_STORE_KEY in on_disk
    assert DAILY_STORE_KEY_PREFIX + "2026-03-15" in on_disk

    reloaded, _ = _progress(JsonFileStore(path))
    assert reloaded.stars_for(1) == 3
    assert reloaded.tracker().best_scores == {1: 1200}
    assert reloaded.tracker().highest_unlocked_level == 2
    assert reloaded.tracker().current_streak == 1
    result = reloaded.daily_result("2026-03-15")
    assert result is not None
    assert result.colors_used == [GameColor.AMBER]
    assert reloaded.daily_result("2026-03-16") is None


def test_corrupt_progress_file_reads_as_empty(tmp_path):
    path = tmp_path / "progress.json"
    path.write_text("{not json")
    store = JsonFileStore(path)
    assert len(store) == 0
    progress, _ = _progress(store)
    assert progress.total_stars == 0


def test_daily_streak_requires_consecutive_wins():
    progress, bus = _progress()
    completed = capture_events(bus, EVENT_DAILY_COMPLETED)
    progress.record_daily_result(DailyResult("2026-03-14", 10, 15, 3))
    progress.record_daily_result(DailyResult("2026-03-15", 11, 15, 2))
    tracker = progress.tracker()
    assert tracker.current_streak == 2
    assert tracker.last_daily_date == "2026-03-15"

    progress.record_daily_result(DailyResult("2026-03-17", 11, 15, 1))
    assert tracker.current_streak == 1
    assert tracker.best_streak == 2
    assert len(completed) == 3


def test_daily_loss_is_recorded_without_touching_streak():
    progress, _ = _progress()
    progress.record_daily_result(DailyResult("2026-03-14", 10, 15, 3))
    progress.record_daily_result(DailyResult("2026-03-15", 15, 15, 0))
    tracker = progress.tracker()
    assert tracker.current_streak == 1
    assert tracker.last_daily_date == "2026-03-14"
    assert progress.daily_result("2026-03-15").stars_earned == 0


def test_replaying_the_same_day_does_not_extend_streak():
    progress, _ = _progress()
    progress.record_daily_result(DailyResult("2026-03-14", 10, 15, 3))
    progress.record_daily_result(DailyResult("2026-03-14", 9, 15, 3))
    assert progress.tracker().current_streak == 1


def test_daily_loss_after_win_keeps_the_win():
    store = {}
    progress, _ = _progress(store)
    progress.record_daily_result(DailyResult("2026-03-15", 10, 20, 3, [GameColor.AMBER]))
    progress.record_daily_result(DailyResult("2026-03-15", 20, 20, 0, [GameColor.CORAL]))

    result = progress.daily_result("2026-03-15")
    assert result.stars_earned == 3
    assert result.colors_used == [GameColor.AMBER]
    stored = json.loads(store[DAILY_STORE_KEY_PREFIX + "2026-03-15"])
    assert stored["stars_earned"] == 3
    assert progress.tracker().current_streak == 1


def test_daily_replay_replaces_only_with_a_better_result():
    progress, _ = _progress()
    progress.record_daily_result(DailyResult("2026-03-15", 14, 20, 2))
    progress.record_daily_result(DailyResult("2026-03-15", 12, 20, 2))
    assert progress.daily_result("2026-03-15").moves_used == 12

    progress.record_daily_result(DailyResult("2026-03-15", 13, 20, 2))
    assert progress.daily_result("2026-03-15").moves_used == 12

    progress.record_daily_result(DailyResult("2026-03-15", 16, 20, 3))
    assert progress.daily_result("2026-03-15").stars_earned == 3


def test_daily_loss_after_win_survives_reload(tmp_path):
    path = tmp_path / "progress.json"
    progress, _ = _progress(JsonFileStore(path))
    progress.record_daily_result(DailyResult("2026-03-15", 10, 20, 3))

    replay, _ = _progress(JsonFileStore(path))
    replay.record_daily_result(DailyResult("2026-03-15", 20, 20, 0))

    reloaded, _ = _progress(JsonFileStore(path))
    assert reloaded.daily_result("2026-03-15").stars_earned == 3


def test_winning_a_level_records_progress():
    store = {}
    game = FloodGame.for_level(1, store=store)
    for color in solve(game.board):
        game.perform_move(color)
    assert game.status == GameStatus.WON
    assert game.progress_system.stars_for(1) == game.stars == 3
    assert game.progress_system.tracker().highest_unlocked_level == 2
    assert PROGRESS_STORE_KEY in store


def test_winning_the_daily_records_result():
    store = {}
    game = FloodGame.for_daily("2026-03-15", store=store)
    for color in solve(game.board):
        game.perform_move(color)
    assert game.status == GameStatus.WON
    result = game.progress_system.daily_result("2026-03-15")
    assert result.stars_earned == 3
    assert result.moves_used == game.session.moves_made
    assert result.move_budget == game.session.total_moves
    assert game.progress_system.tracker().current_streak == 1
    assert DAILY_STORE_KEY_PREFIX + "2026-03-15" in store


def test_losing_the_daily_records_zero_stars():
    store = {}
    game = FloodGame.for_daily("2026-03-15", store=store)
    while game.status == GameStatus.PLAYING:
        current = game.board.color_at((0, 0))
        # Alternate between two colours so the board cannot be finished in budget.
        game.perform_move(GameColor.CORAL if current != GameColor.CORAL else GameColor.AMBER)
    assert game.status == GameStatus.LOST
    result = game.progress_system.daily_result("2026-03-15")
    assert result.stars_earned == 0
    assert game.progress_system.tracker().current_streak == 0
