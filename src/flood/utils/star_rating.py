from flood.constants import COMBO_STAR_TIERS, THREE_STAR_SLACK, TWO_STAR_SLACK


def combo_forgiveness(max_combo: int) -> int:
    for threshold, forgiven in COMBO_STAR_TIERS:
        if max_combo >= threshold:
            return forgiven
    return 0


def calculate_stars(moves_used: int, optimal_moves: int, max_combo: int = 0) -> int:
    """1-3 stars; long combos forgive a move or two before the thresholds apply."""
    effective = moves_used - combo_forgiveness(max_combo)
    if effective <= optimal_moves + THREE_STAR_SLACK:
        return 3
    if effective <= optimal_moves + TWO_STAR_SLACK:
        return 2
    return 1
