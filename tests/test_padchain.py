from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from padchain.cli import main
from padchain.cost import CostEvaluator
from padchain.errors import IllegalMove, MalformedCode, UnreachablePair
from padchain.expander import (
    ChainConfig,
    code_value,
    expand_code,
    parse_code,
    score_codes,
    score_codes_parallel,
    total_length,
)
from padchain.keypad import (
    DIRECTIONAL_LAYOUT,
    NUMERIC_LAYOUT,
    KeypadLayout,
    manhattan,
    neighbors,
    step,
    type_sequence,
)
from padchain.memory import load_cost_cache, save_cost_cache
from padchain.paths import shortest_paths

EXAMPLE_CODES = ["029A", "980A", "179A", "456A", "379A"]
EXAMPLE_LENGTHS = {"029A": 68, "980A": 60, "179A": 68, "456A": 64, "379A": 64}
LAYOUTS = [NUMERIC_LAYOUT, DIRECTIONAL_LAYOUT]


def quiet_config(tmp_path: Path, **kwargs) -> ChainConfig:
    return ChainConfig(verbose=False, fail_log=str(tmp_path / "rejected.jsonl"), **kwargs)


# ---------------------------------------------------------------------------
# Keypad topology
# ---------------------------------------------------------------------------
def test_layout_shapes_and_gaps():
    assert (NUMERIC_LAYOUT.height, NUMERIC_LAYOUT.width) == (4, 3)
    assert NUMERIC_LAYOUT.gap == (3, 0)
    assert (DIRECTIONAL_LAYOUT.height, DIRECTIONAL_LAYOUT.width) == (2, 3)
    assert DIRECTIONAL_LAYOUT.gap == (0, 0)
    assert sorted(NUMERIC_LAYOUT.keys) == sorted("0123456789A")
    assert sorted(DIRECTIONAL_LAYOUT.keys) == sorted("^v<>A")


def test_neighbors_skip_gap_and_edges():
    assert neighbors(NUMERIC_LAYOUT, "A") == {"^": "3", "<": "0"}
    assert neighbors(NUMERIC_LAYOUT, "1") == {"^": "4", ">": "2"}
    assert neighbors(DIRECTIONAL_LAYOUT, "<") == {">": "v"}
    assert neighbors(DIRECTIONAL_LAYOUT, "v") == {"^": "^", "<": "<", ">": ">"}


def test_step_rejects_illegal_moves():
    assert step(NUMERIC_LAYOUT, "5", "^") == "8"
    with pytest.raises(IllegalMove):
        step(NUMERIC_LAYOUT, "0", "<")
    with pytest.raises(IllegalMove):
        step(DIRECTIONAL_LAYOUT, "^", "<")
    with pytest.raises(IllegalMove):
        step(DIRECTIONAL_LAYOUT, "A", "A")


def test_layouts_are_read_only_and_hashable():
    with pytest.raises(TypeError):
        NUMERIC_LAYOUT.positions["X"] = (9, 9)  # type: ignore[index]
    assert "X" not in NUMERIC_LAYOUT.keys
    assert len({NUMERIC_LAYOUT, DIRECTIONAL_LAYOUT}) == 2
    rebuilt = KeypadLayout.from_rows("numeric", ["789", "456", "123", "#0A"])
    assert dict(rebuilt.positions) == dict(NUMERIC_LAYOUT.positions)


def test_unknown_key_lookup_is_descriptive():
    with pytest.raises(KeyError, match="numeric"):
        neighbors(NUMERIC_LAYOUT, "^")


@pytest.mark.parametrize(
    "rows",
    [
        ["12", "3"],
        ["1#", "#2"],
        ["12", "1#"],
        ["123"],
    ],
)
def test_from_rows_validates_grid(rows):
    with pytest.raises(ValueError):
        KeypadLayout.from_rows("broken", rows)


def test_type_sequence_follows_presses():
    assert type_sequence(NUMERIC_LAYOUT, "<A^A>^^AvvvA") == "029A"
    with pytest.raises(IllegalMove):
        type_sequence(NUMERIC_LAYOUT, "<<A")


# ---------------------------------------------------------------------------
# Path enumeration
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("layout", LAYOUTS, ids=lambda layout: layout.name)
def test_same_key_has_single_activate_path(layout):
    for key in layout.keys:
        assert shortest_paths(layout, key, key) == frozenset({("A",)})


@pytest.mark.parametrize("layout", LAYOUTS, ids=lambda layout: layout.name)
def test_paths_are_manhattan_and_avoid_gap(layout):
    for start in layout.keys:
        for end in layout.keys:
            paths = shortest_paths(layout, start, end)
            assert paths
            for path in paths:
                assert len(path) == manhattan(layout, start, end) + 1
                assert path[-1] == "A"
                # stepping raises IllegalMove on the gap
                assert type_sequence(layout, path, start=start) == end


def test_tie_break_sets_keep_every_shortest_path():
    numeric = shortest_paths(NUMERIC_LAYOUT, "A", "7")
    assert len(numeric) == 9
    assert ("<", "<", "^", "^", "^", "A") not in numeric
    directional = shortest_paths(DIRECTIONAL_LAYOUT, "A", "<")
    assert directional == frozenset({("v", "<", "<", "A"), ("<", "v", "<", "A")})


def test_disconnected_layout_raises_unreachable():
    split = KeypadLayout.from_rows("split", ["1#2"])
    with pytest.raises(UnreachablePair):
        shortest_paths(split, "1", "2")


# ---------------------------------------------------------------------------
# Layered costs
# ---------------------------------------------------------------------------
def test_depth_zero_is_path_length():
    evaluator = CostEvaluator()
    assert evaluator.minimal_keystrokes(("<", "A"), 0) == 2
    assert evaluator.minimal_keystrokes((), 0) == 0
    assert evaluator.minimal_keystrokes((), 4) == 0


def test_negative_depth_rejected():
    with pytest.raises(ValueError):
        CostEvaluator().minimal_keystrokes(("A",), -1)


def test_cost_monotonic_in_depth():
    evaluator = CostEvaluator()
    for path in [("A",), ("<", "A"), ("v", "<", "<", "A"), ("^", ">", "A"), (">", ">", "^", "A")]:
        costs = [evaluator.minimal_keystrokes(path, depth) for depth in range(8)]
        assert costs == sorted(costs)


def test_paths_with_foreign_presses_rejected():
    evaluator = CostEvaluator()
    with pytest.raises(ValueError, match="directional"):
        evaluator.minimal_keystrokes(("7", "A"), 0)
    with pytest.raises(ValueError):
        evaluator.minimal_keystrokes(("<", "X", "A"), 2)
    assert not evaluator.cache


def test_repeated_call_is_cache_hit():
    evaluator = CostEvaluator()
    path = ("<", "v", "<", "A")
    first = evaluator.minimal_keystrokes(path, 5)
    misses, hits = evaluator.stats.misses, evaluator.stats.hits
    second = evaluator.minimal_keystrokes(path, 5)
    assert second == first
    assert evaluator.stats.misses == misses
    assert evaluator.stats.hits == hits + 1


def test_clear_resets_state():
    evaluator = CostEvaluator()
    total_length("029A", 3, evaluator)
    evaluator.clear()
    assert not evaluator.cache
    assert evaluator.stats.misses == 0


# ---------------------------------------------------------------------------
# Codes and scoring
# ---------------------------------------------------------------------------
def test_parse_code_and_value():
    assert parse_code("029a") == ("0", "2", "9", "A")
    assert code_value("029A") == 29
    assert code_value("980A") == 980
    assert code_value("000A") == 0
    assert code_value("A029") == 0
    assert code_value("12A3A") == 12
    with pytest.raises(MalformedCode):
        parse_code("")
    with pytest.raises(MalformedCode, match="B"):
        parse_code("12B")


def test_zero_layers_counts_numeric_presses():
    assert total_length("029A", 0) == 12


@pytest.mark.parametrize("code", EXAMPLE_CODES)
def test_two_layer_reference_lengths(code):
    assert total_length(code, 2) == EXAMPLE_LENGTHS[code]


def test_two_layer_total(tmp_path: Path):
    report = score_codes(EXAMPLE_CODES, quiet_config(tmp_path))
    first = report.results[0]
    assert (first.code, first.value, first.length) == ("029A", 29, 68)
    assert first.complexity == 68 * 29
    assert report.as_dict()["codes"][0]["complexity"] == 1972
    assert report.total == 126384
    assert not report.rejected


def test_twenty_five_layer_total_and_regression(tmp_path: Path):
    shared = CostEvaluator()
    report = score_codes(EXAMPLE_CODES, quiet_config(tmp_path, layers=25), shared)
    assert report.total == 154115708116294
    for result in report.results:
        assert result.length == total_length(result.code, 25, CostEvaluator())
        assert result.length > EXAMPLE_LENGTHS[result.code]


@pytest.mark.parametrize("layers", [0, 1, 2, 3])
def test_expanded_sequence_types_the_code(layers):
    evaluator = CostEvaluator()
    for code in EXAMPLE_CODES:
        presses = expand_code(code, layers, evaluator)
        assert len(presses) == total_length(code, layers, evaluator)
        for _ in range(layers):
            presses = type_sequence(DIRECTIONAL_LAYOUT, presses)
        assert type_sequence(NUMERIC_LAYOUT, presses) == code


def test_malformed_codes_skipped_and_logged(tmp_path: Path):
    config = quiet_config(tmp_path)
    report = score_codes(["029A", "12B", "  ", "980A"], config)
    assert [r.code for r in report.results] == ["029A", "980A"]
    assert [code for code, _ in report.rejected] == ["12B", "  "]
    lines = (tmp_path / "rejected.jsonl").read_text().splitlines()
    assert [json.loads(line)["code"] for line in lines] == ["12B", "  "]


def test_total_is_order_independent(tmp_path: Path):
    forward = score_codes(EXAMPLE_CODES, quiet_config(tmp_path))
    backward = score_codes(list(reversed(EXAMPLE_CODES)), quiet_config(tmp_path))
    assert forward.total == backward.total


def test_parallel_matches_serial(tmp_path: Path):
    config = quiet_config(tmp_path, max_workers=2)
    report = score_codes_parallel(EXAMPLE_CODES + ["9X"], config)
    assert [r.code for r in report.results] == EXAMPLE_CODES
    assert report.total == 126384
    assert report.rejected and report.rejected[0][0] == "9X"


def test_config_validation():
    with pytest.raises(ValueError):
        ChainConfig(layers=-1)
    with pytest.raises(ValueError):
        ChainConfig(max_workers=-2)


# ---------------------------------------------------------------------------
# Persistence and CLI
# ---------------------------------------------------------------------------
def test_cost_cache_roundtrip(tmp_path: Path):
    db = str(tmp_path / "costs.json")
    evaluator = CostEvaluator()
    expected = total_length("379A", 10, evaluator)
    save_cost_cache(evaluator.export_cache(), db)

    warm = CostEvaluator()
    added = warm.load_cache(load_cost_cache(db))
    assert added == len(evaluator.cache)
    assert total_length("379A", 10, warm) == expected
    assert warm.stats.misses == 0


def test_stale_cost_cache_ignored(tmp_path: Path):
    db = tmp_path / "costs.json"
    db.write_text(json.dumps({"fingerprint": "stale", "entries": {"A|1": 1}}))
    assert load_cost_cache(str(db)) == {}
    assert load_cost_cache(str(tmp_path / "missing.json")) == {}


def test_cli_prints_total(tmp_path: Path, capsys):
    outfile = tmp_path / "report.json"
    status = main(EXAMPLE_CODES + ["--quiet", "--outfile", str(outfile)])
    assert status == 0
    assert capsys.readouterr().out.strip().splitlines()[-1] == "126384"
    payload = json.loads(outfile.read_text())
    assert payload["total"] == 126384
    assert outfile.with_suffix(".stats.csv").exists()


def test_cli_part_two_and_rejections(tmp_path: Path, capsys):
    status = main(
        EXAMPLE_CODES
        + ["X1", "--part", "2", "--quiet", "--fail-log", str(tmp_path / "bad.jsonl"), "--cache-db", str(tmp_path / "c.json")]
    )
    assert status == 1
    assert capsys.readouterr().out.strip().splitlines()[-1] == "154115708116294"
    assert (tmp_path / "c.json").exists()


def test_cli_show_sequence(tmp_path: Path, capsys):
    main(["029A", "--layers", "1", "--quiet", "--show-sequence"])
    out = capsys.readouterr().out.strip().splitlines()
    code, presses = out[0].split(": ")
    assert code == "029A"
    assert len(presses) == int(out[-1]) // 29
