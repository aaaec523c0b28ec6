import pytest

from orbfall.board.match_finder import MatchGroup, find_matches, run_length_matcher, sort_groups

from tests.helpers import grid_from


def test_horizontal_and_vertical_runs():
    grid = grid_from(
        "0001",
        "2341",
        "2431",
    )
    groups = find_matches(grid)
    assert len(groups) == 2
    by_symbol = {g.symbol: g for g in groups}
    assert by_symbol[0].cells == frozenset({(0, 0), (0, 1), (0, 2)})
    assert by_symbol[1].cells == frozenset({(0, 3), (1, 3), (2, 3)})


def test_l_shape_merges_into_one_group():
    grid = grid_from(
        "0..",
        "0..",
        "000",
    )
    groups = find_matches(grid)
    assert len(groups) == 1
    assert groups[0].size == 5
    assert groups[0].anchor == (0, 0)


def test_t_shape_merges_into_one_group():
    grid = grid_from(
        "111",
        ".1.",
        ".1.",
    )
    groups = find_matches(grid)
    assert [g.size for g in groups] == [5]


def test_touching_runs_of_different_symbols_stay_separate():
    grid = grid_from(
        "000",
        "111",
    )
    groups = sort_groups(find_matches(grid))
    assert [g.symbol for g in groups] == [0, 1]
    assert all(g.size == 3 for g in groups)


def test_adjacent_parallel_runs_of_same_symbol_merge():
    grid = grid_from(
        "000",
        "000",
    )
    groups = find_matches(grid)
    assert len(groups) == 1
    assert groups[0].size == 6


def test_unmatched_neighbour_of_same_symbol_is_not_absorbed():
    grid = grid_from(
        "000",
        "012",
    )
    groups = find_matches(grid)
    assert len(groups) == 1
    assert (1, 0) not in groups[0].cells


def test_empty_cells_never_match():
    grid = grid_from(
        "...",
        "0.0",
    )
    assert find_matches(grid) == []


def test_pairs_do_not_match():
    grid = grid_from(
        "0011",
        "1100",
    )
    assert find_matches(grid) == []


def test_detection_is_idempotent():
    grid = grid_from(
        "0001",
        "2221",
        "3341",
    )
    before = grid.snapshot()
    first = sort_groups(find_matches(grid))
    second = sort_groups(find_matches(grid))
    assert first == second
    assert grid.snapshot() == before


def test_long_run_is_one_group():
    grid = grid_from("22222")
    groups = find_matches(grid)
    assert len(groups) == 1
    assert groups[0].size == 5


def test_sort_groups_orders_by_anchor():
    late = MatchGroup(symbol=1, cells=frozenset({(2, 0), (2, 1), (2, 2)}))
    early = MatchGroup(symbol=0, cells=frozenset({(0, 4), (1, 4), (2, 4)}))
    assert sort_groups([late, early]) == [early, late]


def test_run_length_matcher_uses_custom_length():
    grid = grid_from(
        "0001",
        "2222",
    )
    four = run_length_matcher(4)
    groups = four(grid)
    assert [g.symbol for g in groups] == [2]
    assert len(find_matches(grid, min_length=2)) == 2
    with pytest.raises(ValueError):
        run_length_matcher(1)
