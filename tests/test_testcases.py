from pathlib import Path
import sys

import pytest

# Add repo root to path
ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from mandel_golden.testcases import TestCase, load_test_cases, parse_line

LINE = "FFFFFFFFF0000000 0000000003333333 4 255 0000 001F 07E0 F800 FFE0 FFFF 1"


def test_parse_line_fields():
    case = parse_line(LINE, 12)
    assert case == TestCase(
        center_x=-(1 << 28),
        center_y=0x3333333,
        zoom=4,
        max_iterations=255,
        anchors=(0x0000, 0x001F, 0x07E0, 0xF800, 0xFFE0, 0xFFFF),
        line_no=12,
    )


def test_zoom_kept_raw_and_iterations_clamped():
    case = parse_line("0 0 42 2000 0 0 0 0 0 FFFF")
    assert case.zoom == 42
    assert case.max_iterations == 1
    assert parse_line("0 0 0 0 0 0 0 0 0 0").max_iterations == 1
    assert parse_line("0 0 0 1023 0 0 0 0 0 0").max_iterations == 1023


def test_prefixed_hex_accepted():
    case = parse_line("0xF0000000 0x0 1 16 0x0000 0x001F 0x07E0 0xF800 0xFFE0 0xFFFF")
    assert case.center_x == -(1 << 28)
    assert case.anchors[-1] == 0xFFFF


def test_short_line_reports_line_number():
    with pytest.raises(ValueError, match="line 3"):
        parse_line("0 0 1 2 0000", 3)


def test_bad_field_reports_line_number():
    with pytest.raises(ValueError, match="line 7"):
        parse_line("0 0 five 20 0 0 0 0 0 0", 7)
    with pytest.raises(ValueError, match="line 8"):
        parse_line("XYZ 0 5 20 0 0 0 0 0 0", 8)


def test_load_skips_blanks_and_comments(tmp_path):
    path = tmp_path / "cases.txt"
    path.write_text(
        "# header\n"
        "\n"
        f"{LINE}\n"
        "   \n"
        "0 0 10 50 0000 2104 4208 630C 8410 FFFF\n"
    )
    cases = load_test_cases(path)
    assert [c.line_no for c in cases] == [3, 5]
    assert cases[1].zoom == 10


def test_bundled_test_cases_parse():
    cases = load_test_cases(ROOT / "configs" / "test_cases.txt")
    assert len(cases) == 5
    assert all(len(c.anchors) == 6 for c in cases)
    # 2000 iterations resets to 1
    assert cases[-1].max_iterations == 1
