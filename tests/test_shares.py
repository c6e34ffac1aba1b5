"""
Tests for share container parsing and base decoding.
"""

import json
import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from quorum.errors import InvalidShareError, MalformedInputError
from quorum.shares import (
    Point,
    decode_value,
    dump_container,
    encode_value,
    load,
    parse_container,
)

FIXTURES = Path(__file__).parent / "fixtures"


def test_decode_hex_value():
    """{"base": "16", "value": "1a"} decodes to 26."""
    print("Testing hex decoding...", end=" ")
    assert decode_value("1a", "16") == 26
    assert decode_value("1A", 16) == 26
    share_set = parse_container({
        "keys": {"n": 1, "k": 1},
        "1": {"base": "16", "value": "1a"},
    })
    assert share_set.points == [Point(1, 26)]
    print("PASS")


def test_decode_bases():
    print("Testing assorted bases...", end=" ")
    assert decode_value("111", "2") == 7
    assert decode_value("213", "4") == 39
    assert decode_value("zz", "36") == 35 * 36 + 35
    assert decode_value(" 42 ", "10") == 42
    assert decode_value("-101", "2") == -5
    assert decode_value("+17", 8) == 15
    print("PASS")


def test_decode_rejects_bad_values():
    print("Testing rejected values...", end=" ")
    bad = [
        ("12", "2"),     # digit out of range for base
        ("", "10"),      # empty
        ("   ", "10"),   # blank
        ("-", "10"),     # sign only
        ("0x1a", "16"),  # prefixes are not digits
        ("1_000", "10"),
        ("10", "1"),     # base too small
        ("10", "37"),    # base too large
        ("10", "ten"),
        ("10", None),
        (None, "10"),
        ("10", True),
    ]
    for value, base in bad:
        try:
            decode_value(value, base)
        except InvalidShareError:
            pass
        else:
            raise AssertionError(f"{value!r} in base {base!r} should have raised")
    print("PASS")


def test_fixture_container():
    print("Testing fixture container...", end=" ")
    share_set = load(FIXTURES / "testcase1.json")
    assert share_set.threshold == 3
    assert share_set.declared == 4
    assert share_set.points == [Point(1, 4), Point(2, 7), Point(3, 12), Point(6, 39)]
    assert share_set.skipped == {}
    print("PASS")


def test_invalid_entries_skipped():
    """Each unusable entry is dropped on its own; the rest survive."""
    print("Testing invalid entries skipped...", end=" ")
    share_set = parse_container({
        "keys": {"n": 8, "k": 2},
        "1": {"base": "10", "value": "5"},
        "2": {"base": "1", "value": "7"},
        "3": {"base": "37", "value": "9"},
        "4": {"base": "10", "value": ""},
        "5": {"base": "2", "value": "12"},
        "6": "not an object",
        "7": {"base": "10", "value": "17"},
        "01": {"base": "10", "value": "5"},
        "note": {"base": "10", "value": "1"},
    })
    assert share_set.threshold == 2
    assert share_set.points == [Point(1, 5), Point(7, 17)]
    assert set(share_set.skipped) == {"2", "3", "4", "5", "6", "01"}
    assert "Duplicate" in share_set.skipped["01"]
    print("PASS")


def test_only_ascii_digit_keys_are_shares():
    """Keys with a trailing newline or non-ASCII digits are not share indices."""
    print("Testing share key matching...", end=" ")
    share_set = parse_container({
        "keys": {"k": 1},
        "1\n": {"base": "10", "value": "5"},
        "\u0661": {"base": "10", "value": "6"},
        "\uff12": {"base": "10", "value": "7"},
        "3": {"base": "10", "value": "8"},
    })
    assert share_set.points == [Point(3, 8)]
    assert share_set.skipped == {}
    print("PASS")


def test_threshold_required():
    print("Testing threshold validation...", end=" ")
    bad = [
        {"1": {"base": "10", "value": "5"}},
        {"keys": {"n": 1}, "1": {"base": "10", "value": "5"}},
        {"keys": {"n": 1, "k": 0}},
        {"keys": {"n": 1, "k": -3}},
        {"keys": {"n": 1, "k": "three"}},
        {"keys": {"n": 1, "k": True}},
        ["not", "an", "object"],
    ]
    for container in bad:
        try:
            parse_container(container)
        except MalformedInputError:
            pass
        else:
            raise AssertionError(f"{container!r} should have raised")

    # A top-level k is accepted as well
    assert parse_container({"k": 2}).threshold == 2
    assert parse_container({"keys": {"k": "3"}}).threshold == 3
    print("PASS")


def test_load_invalid_json():
    print("Testing invalid JSON...", end=" ")
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "broken.json"
        path.write_text('{"keys": {"k": 2}, "1": ')
        try:
            load(path)
        except MalformedInputError:
            pass
        else:
            raise AssertionError("invalid JSON should have raised")
    print("PASS")


def test_dump_and_parse():
    """Test a dumped container parses back to the same points."""
    print("Testing dump and parse...", end=" ")
    points = [Point(1, 2**130 + 5), Point(2, -77), Point(9, 0)]
    for base in (2, 36):
        container = json.loads(json.dumps(dump_container(3, points, base)))
        assert container["keys"] == {"n": 3, "k": 3}
        assert all(container[str(p.x)]["base"] == str(base) for p in points)
        share_set = parse_container(container)
        assert share_set.points == points
    assert encode_value(255, 16) == "ff"
    assert encode_value(0, 7) == "0"
    print("PASS")


def main():
    print("=" * 50)
    print("  Share Container Tests")
    print("=" * 50)
    print()

    tests = [
        test_decode_hex_value,
        test_decode_bases,
        test_decode_rejects_bad_values,
        test_fixture_container,
        test_invalid_entries_skipped,
        test_only_ascii_digit_keys_are_shares,
        test_threshold_required,
        test_load_invalid_json,
        test_dump_and_parse,
    ]

    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"FAIL: {e}")
            import traceback
            traceback.print_exc()
            failed += 1

    print()
    print(f"Results: {passed} passed, {failed} failed")
    return failed == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
