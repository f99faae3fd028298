from flood.ai.solver import solve_move_count
from flood.components.game_color import palette_of
from flood.components.level import Difficulty, Tier
from flood.factories import board_shapes
from flood.factories.levels import (
    all_levels,
    bonus_for_level,
    build_level,
    generate_board_from_level,
    generate_level,
    get_level,
    level_seed,
)


def test_level_seeds_follow_fixed_formula():
    assert level_seed(1) == 38
    assert level_seed(10) == 317
    assert build_level(7).seed == 7 * 31 + 7


def test_onboarding_levels_use_fixed_configs():
    first = build_level(1)
    assert (first.grid_size, first.color_count, first.move_budget) == (3, 3, 10)
    assert first.obstacle_config is None
    fifth = build_level(5)
    assert (fifth.grid_size, fifth.color_count, fifth.move_budget) == (9, 5, 25)


def test_early_levels_get_generous_budget():
    level = build_level(8)
    assert level.grid_size == 9 and level.color_count == 5
    assert level.move_budget == level.optimal_moves + 8
    assert level.obstacle_config is None


def test_stone_levels_apply_their_obstacles():
    level = build_level(25)
    assert level.obstacle_config is not None
    assert level.obstacle_config.voids == tuple(board_shapes.diamond(9))
    board = generate_board_from_level(level)
    for pos in level.obstacle_config.stones:
        assert not board.is_playable(pos)
    for pos in level.obstacle_config.voids:
        assert not board.is_playable(pos)


def test_boss_level_has_tight_budget():
    level = build_level(50)
    assert level.move_budget == level.optimal_moves + 2


def test_final_level_is_solvable():
    level = build_level(100)
    assert level.tier == Tier.CURRENT
    board = generate_board_from_level(level)
    assert board.size == level.grid_size
    assert board.is_playable((0, 0))
    moves = solve_move_count(board)
    assert 0 < moves < level.grid_size * level.grid_size
    assert level.move_budget == level.optimal_moves + 1


def test_level_construction_is_deterministic():
    assert build_level(33) == build_level(33)
    assert build_level(60) == build_level(60)


def test_bonus_schedule():
    assert bonus_for_level(10) == (0, 2)
    for level_id in range(15, 101):
        count, multiplier = bonus_for_level(level_id)
        assert count in (0, 1, 2)
        if count:
            assert multiplier == (3 if level_id >= 70 else 2)


def test_lookup_outside_table_is_none():
    assert get_level(0) is None
    assert get_level(101) is None


def test_full_table():
    levels = all_levels()
    assert len(levels) == 100
    assert [level.id for level in levels] == list(range(1, 101))
    for level in levels:
        assert level.move_budget >= level.optimal_moves, level.id
        assert level.tier == (Tier.SPLASH if level.id <= 50 else Tier.CURRENT)
        assert level.optimal_moves < level.grid_size * level.grid_size, level.id
    early = [lv.move_budget - lv.optimal_moves for lv in levels[5:20]]
    late = [lv.move_budget - lv.optimal_moves for lv in levels[65:99]]
    assert sum(early) / len(early) > sum(late) / len(late)
    assert get_level(42) is levels[41]


def test_generate_level_difficulty_extras():
    for difficulty, extra in [
        (Difficulty.EASY, 8),
        (Difficulty.MEDIUM, 4),
        (Difficulty.HARD, 2),
        (Difficulty.EXPERT, 0),
    ]:
        level = generate_level(42, difficulty)
        assert level.move_budget == level.optimal_moves + extra
        assert level.board.size == 9
        assert level.seed == 42


def test_generate_level_custom_size_and_colours():
    colors = palette_of(3)
    level = generate_level(3, size=5, colors=colors)
    assert level.board.size == 5
    assert level.board.palette == colors
