import numpy as np
import pytest

from mandel_golden.colours import (
    blue,
    build_colour_map,
    generate_colour_map,
    generate_unique_colours,
    get_spread_colour_index,
    green,
    pack_rgb565,
    red,
    spread_factor,
    spread_indices,
)

RAMP = [0x0000, 0x2104, 0x4208, 0x630C, 0x8410, 0xFFFF]


def _channels(c):
    return red(c), green(c), blue(c)


def test_rgb565_fields():
    assert _channels(0xFFFF) == (31, 63, 31)
    assert _channels(0xF800) == (31, 0, 0)
    assert _channels(0x07E0) == (0, 63, 0)
    assert _channels(0x001F) == (0, 0, 31)
    assert _channels(0x2104) == (4, 8, 4)
    assert pack_rgb565(4, 8, 4) == 0x2104


# -----------------------------
# unique colours
# -----------------------------

def test_ramp_unique_colours():
    unique = generate_unique_colours(RAMP)
    # four segments of 8 steps, one of 31, each including its start colour
    assert len(unique) == 9 * 4 + 32
    assert unique[:6] == [0x0000, 0x0821, 0x1042, 0x1863, 0x2084, 0x20A4]
    assert unique[8] == 0x2104
    assert unique[9] == 0x2104  # end of a segment is the start of the next
    assert unique[-1] == 0xFFFF


def test_identical_anchors_give_one_colour_per_segment():
    assert generate_unique_colours([0x1234] * 6) == [0x1234] * 5


def test_unique_colours_requires_six_anchors():
    with pytest.raises(ValueError):
        generate_unique_colours(RAMP[:5])


@pytest.mark.parametrize("start, end", [
    (0x0000, 0xFFFF),
    (0xFFFF, 0x0000),
    (0xF800, 0x07E0),
    (0x001F, 0xF81F),
    (0x1234, 0xABCD),
    (0x7BEF, 0x7BEF),
])
def test_segment_is_monotonic_per_channel(start, end):
    unique = generate_unique_colours([start, end, end, end, end, end])
    segment = unique[:len(unique) - 4]
    assert segment[0] == start
    assert segment[-1] == end

    for ch in (red, green, blue):
        values = [ch(c) for c in segment]
        lo, hi = sorted((ch(start), ch(end)))
        assert all(lo <= v <= hi for v in values)
        steps = np.diff(values)
        assert np.all(np.abs(steps) <= 1)
        if ch(end) >= ch(start):
            assert np.all(steps >= 0)
        else:
            assert np.all(steps <= 0)

    # length is set by the largest channel distance
    dist = max(abs(ch(end) - ch(start)) for ch in (red, green, blue))
    assert len(segment) == dist + 1


# -----------------------------
# colour map
# -----------------------------

def test_colour_map_length_for_all_max_iterations():
    unique = generate_unique_colours(RAMP)
    for m in range(1, 1024):
        assert len(generate_colour_map(m, unique)) == m


@pytest.mark.slow
def test_colour_map_index_never_out_of_range():
    """
    Every reachable (unique_count, max_iterations) pair: 5 identical anchors
    give 5 colours, 5 full-range segments give 5 * 64 = 320.
    Using range(u) as the path makes the last read index visible.
    """
    for u in range(5, 321):
        path = list(range(u))
        for m in range(1, 1024):
            cmap = generate_colour_map(m, path)
            assert len(cmap) == m
            assert cmap[-1] < u


@pytest.mark.parametrize("u", [5, 7, 68, 127, 320])
def test_colour_map_walks_path_in_order(u):
    path = list(range(u))
    for m in (1, 3, 50, 64, 255, 256, 1000, 1023):
        cmap = generate_colour_map(m, path)
        assert cmap[0] == 0
        assert all(a <= b for a, b in zip(cmap, cmap[1:]))


def test_colour_map_downsample_stride():
    path = list(range(10))
    assert generate_colour_map(3, path) == [0, 3, 6]
    assert generate_colour_map(4, path) == [0, 2, 4, 6]
    assert generate_colour_map(9, path) == list(range(9))


def test_colour_map_upsample_repeats():
    path = [10, 20, 30]
    assert generate_colour_map(6, path) == [10, 10, 20, 20, 30, 30]
    # stride ceil(7/3) = 3; the last colour is never reached
    assert generate_colour_map(7, path) == [10, 10, 10, 20, 20, 20, 30]
    assert generate_colour_map(4, path) == [10, 10, 20, 20]
    assert generate_colour_map(3, path) == path


def test_build_colour_map_dtype():
    cmap = build_colour_map(50, RAMP)
    assert cmap.dtype == np.uint16
    assert cmap.shape == (50,)
    assert cmap[0] == 0x0000


# -----------------------------
# spread index
# -----------------------------

def test_spread_identity_below_16():
    for m in range(1, 16):
        for i in range(m):
            assert get_spread_colour_index(i, m) == i


def test_spread_values():
    assert spread_factor(50) == 2
    assert spread_factor(1023) == 17
    assert get_spread_colour_index(10, 50) == 20
    assert get_spread_colour_index(30, 50) == 49
    assert get_spread_colour_index(0, 1023) == 0
    assert get_spread_colour_index(60, 1023) == 1020
    assert get_spread_colour_index(61, 1023) == 1022


def test_spread_in_range_for_all_m():
    for m in range(1, 1024):
        for i in range(m):
            assert 0 <= get_spread_colour_index(i, m) <= m - 1


@pytest.mark.parametrize("m", [1, 7, 15, 16, 50, 255, 1023])
def test_spread_indices_matches_scalar(m):
    its = np.arange(m)
    expected = [get_spread_colour_index(int(i), m) for i in its]
    np.testing.assert_array_equal(spread_indices(its, m), expected)
