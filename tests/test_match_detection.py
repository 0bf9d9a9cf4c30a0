from gemmatch.systems.match import creates_match_at, find_match_groups, find_matches


def _grid(rows):
    return [list(row) for row in rows]


def test_two_in_a_row_is_not_a_match():
    grid = _grid([
        ["a", "a", "b"],
        ["b", "c", "a"],
        ["c", "b", "c"],
    ])
    assert find_matches(grid) == set()


def test_five_run_returns_all_five_cells():
    grid = _grid([
        ["a", "a", "a", "a", "a"],
        ["b", "c", "b", "c", "b"],
    ])
    assert find_matches(grid) == {(0, c) for c in range(5)}


def test_crossing_runs_share_the_intersection():
    grid = _grid([
        ["x", "a", "x"],
        ["a", "a", "a"],
        ["y", "a", "y"],
    ])
    matches = find_matches(grid)
    assert matches == {(0, 1), (1, 0), (1, 1), (1, 2), (2, 1)}
    groups = find_match_groups(grid)
    assert groups == [sorted(matches)]


def test_separate_runs_form_separate_groups():
    grid = _grid([
        ["a", "a", "a", "b"],
        ["c", "d", "c", "b"],
        ["d", "c", "d", "b"],
    ])
    groups = find_match_groups(grid)
    assert groups == [[(0, 0), (0, 1), (0, 2)], [(0, 3), (1, 3), (2, 3)]]


def test_empty_cells_break_runs():
    grid = _grid([
        ["a", None, "a", "a"],
        [None, None, None, None],
    ])
    assert find_matches(grid) == set()


def test_creates_match_at_checks_both_sides():
    grid = _grid([
        ["a", None, "a"],
        ["b", "c", "d"],
        ["b", "d", "c"],
    ])
    assert creates_match_at(grid, "a", 0, 1)
    assert not creates_match_at(grid, "c", 0, 1)
    assert creates_match_at(grid, "b", 0, 0)
    assert not creates_match_at(grid, "a", 1, 0)
