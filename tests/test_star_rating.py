from flood.utils.star_rating import calculate_stars, combo_forgiveness


def test_star_thresholds():
    optimal = 10
    assert calculate_stars(optimal, optimal) == 3
    assert calculate_stars(optimal + 1, optimal) == 3
    assert calculate_stars(optimal + 2, optimal) == 2
    assert calculate_stars(optimal + 3, optimal) == 2
    assert calculate_stars(optimal + 4, optimal) == 1
    assert calculate_stars(optimal + 20, optimal) == 1


def test_beating_the_estimate_still_gives_three_stars():
    assert calculate_stars(7, 10) == 3


def test_combo_forgiveness_tiers():
    assert combo_forgiveness(0) == 0
    assert combo_forgiveness(2) == 0
    assert combo_forgiveness(3) == 1
    assert combo_forgiveness(4) == 1
    assert combo_forgiveness(5) == 2
    assert combo_forgiveness(9) == 2


def test_long_combos_forgive_extra_moves():
    assert calculate_stars(12, 10, max_combo=3) == 3
    assert calculate_stars(14, 10, max_combo=5) == 2
    assert calculate_stars(14, 10, max_combo=0) == 1
