import numpy as np
import pytest

from usm2.helpers import (
    align,
    blit_16_to_8,
    blit_rgb_to_bgra,
    blit_rgba_to_bgra,
    blit_y_to_bgra,
    clamp,
    gettime,
    rescale,
    round_half_away,
    scale_area,
)


@pytest.mark.parametrize("value", [-5, 0, 3, 10, 11])
def test_clamp_stays_in_range(value):
    result = clamp(value, 0, 10)
    assert 0 <= result <= 10
    if 0 <= value <= 10:
        assert result == value


@pytest.mark.parametrize("value", [0, 1, 3, 4, 5, 17, 100])
@pytest.mark.parametrize("n", [1, 4, 16])
def test_align_is_smallest_multiple_not_below(value, n):
    result = align(value, n)
    assert result % n == 0
    assert value <= result < value + n


def test_align_rejects_zero():
    with pytest.raises(ValueError):
        align(5, 0)


def test_rescale_maps_endpoints():
    assert rescale(2.0, 2.0, 6.0, 10.0, 20.0) == pytest.approx(10.0)
    assert rescale(6.0, 2.0, 6.0, 10.0, 20.0) == pytest.approx(20.0)


def test_round_half_away_from_zero():
    assert round_half_away(2.5) == 3
    assert round_half_away(-2.5) == -3


@pytest.mark.parametrize("value", [0.2, 1.49, 7.5, 100.0])
def test_round_half_away_is_symmetric(value):
    assert round_half_away(-value) == -round_half_away(value)
    assert abs(round_half_away(value) - value) <= 0.5


def test_scale_area_zero_factor_is_noop():
    assert scale_area(0.0, 5, 6, 7, 8) == (5, 6, 7, 8)


def test_scale_area_unit_factor_is_noop():
    assert scale_area(1.0, 5, 6, 70, 80) == (5, 6, 70, 80)


def test_scale_area_keeps_centre():
    x, y, w, h = 100, 50, 40, 30
    nx, ny, nw, nh = scale_area(2.0, x, y, w, h)
    assert nw > w and nh > h
    assert abs((2 * nx + nw) - (2 * x + w)) <= 1
    assert abs((2 * ny + nh) - (2 * y + h)) <= 1


def test_blit_rgb_to_bgra_swaps_and_sets_opaque():
    out = blit_rgb_to_bgra(bytes([10, 20, 30]), 1, 1, 3, 3)
    assert list(out) == [30, 20, 10, 255]


def test_blit_rgba_to_bgra_keeps_alpha():
    out = blit_rgba_to_bgra(bytes([1, 2, 3, 4, 5, 6, 7, 8]), 2, 1, 4, 8)
    assert list(out) == [3, 2, 1, 4, 7, 6, 5, 8]


def test_blit_y_to_bgra_expands_grey():
    out = blit_y_to_bgra(bytes([7, 99]), 1, 1, 2, False, 2)
    assert list(out) == [7, 7, 7, 255]


def test_blit_y_to_bgra_alpha_ignored_with_channel_step():
    out = blit_y_to_bgra(bytes([7, 99]), 1, 1, 2, True, 2)
    assert out[3] == 255


def test_blit_respects_strides():
    source = bytes([1, 2, 3, 0xEE, 4, 5, 6, 0xEE])
    out = blit_rgb_to_bgra(source, 1, 2, 3, 4, out_stride=6)
    assert len(out) == 12
    assert list(out[0:4]) == [3, 2, 1, 255]
    assert list(out[6:10]) == [6, 5, 4, 255]
    assert list(out[4:6]) == [0, 0]


def test_blit_rejects_small_output_stride():
    with pytest.raises(ValueError):
        blit_rgb_to_bgra(bytes([1, 2, 3]), 1, 1, 3, 3, out_stride=2)


def test_blit_rejects_short_source():
    with pytest.raises(ValueError):
        blit_rgb_to_bgra(bytes([1, 2]), 1, 1, 3, 3)


def test_blit_16_to_8_endpoints():
    source = np.array([0, 32768], dtype=np.uint16).tobytes()
    out = blit_16_to_8(source, 2, 1, 1, 4)
    assert list(out) == [0, 255]


def test_blit_16_to_8_is_monotonic_over_range():
    values = np.arange(0, 32769, 257, dtype=np.uint16)
    out = blit_16_to_8(values.tobytes(), len(values), 1, 1, len(values) * 2)
    result = list(out)
    assert result == sorted(result)
    assert len(result) == len(values)


def test_gettime_does_not_go_backwards():
    first = gettime()
    second = gettime()
    assert second >= first