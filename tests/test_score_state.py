from flood.components.score_state import ScoreState, calculate_end_bonus, calculate_move_score


def test_move_score_formula():
    assert calculate_move_score(12, 3.0) == 720
    assert calculate_move_score(5) == 100
    assert calculate_move_score(3, 1.0, 1.5) == 90
    assert calculate_move_score(1, 1.0, 1.0, 3) == 60


def test_move_score_truncates():
    # 1 * 20 * 1.5 ** 3 = 67.5
    assert calculate_move_score(1, 1.0, 1.5 ** 3) == 67


def test_end_bonus():
    assert calculate_end_bonus(3, True) == 650
    assert calculate_end_bonus(3, False) == 150
    assert calculate_end_bonus(0, False) == 0
    assert calculate_end_bonus(-2, True) == 500


def test_static_helpers_match_module_functions():
    assert ScoreState.calculate_move_score(12, 3.0) == 720
    assert ScoreState.calculate_end_bonus(3, True) == 650


def test_record_move_accumulates():
    score = ScoreState()
    score.record_move(4, 80)
    score.record_move(2, 40)
    assert score.total_score == 120
    assert score.last_move_score == 40
    assert score.last_cells_absorbed == 2


def test_tally_counts_moves_then_perfect_bonus():
    score = ScoreState(total_score=100)
    score.record_end_bonus(2, True)
    assert score.is_tallying
    assert score.final_score == 100 + 2 * 50 + 500

    assert score.apply_tally_tick()
    assert score.apply_tally_tick()
    assert not score.apply_tally_tick()
    assert score.total_score == 200
    assert score.is_tallying, "Perfect bonus is still staged"

    assert score.apply_perfect_bonus()
    assert not score.apply_perfect_bonus()
    assert score.total_score == 700
    assert not score.is_tallying


def test_settle_applies_everything_at_once():
    score = ScoreState(total_score=10)
    score.record_end_bonus(3, False)
    assert score.settle() == 150
    assert score.total_score == 160
    assert score.final_score == 160


def test_reset_clears_state():
    score = ScoreState()
    score.record_move(6, 120)
    score.record_end_bonus(4, True)
    score.reset()
    assert score == ScoreState()
