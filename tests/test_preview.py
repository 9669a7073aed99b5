import struct

import pytest

from usm2.image import ImageError, IntImage
from usm2.preview import ChannelLayout, color_channels, preview_bgra, source_mask


def _image(width, height, channels, values, bytes_per_channel=1):
    image = IntImage(width, height, bytes_per_channel, channels)
    if bytes_per_channel == 1:
        image.data[:] = bytes(values)
    else:
        image.data[:] = struct.pack(f"={len(values)}H", *values)
    return image


def test_color_channels_layer_planes_with_alpha():
    assert color_channels(ChannelLayout(layer_planes=3, transparency_mask=1), 4) == (3, True)


def test_color_channels_non_layer_only():
    assert color_channels(ChannelLayout(non_layer_planes=2), 2) == (2, False)


def test_color_channels_non_layer_with_masks_falls_back_to_planes():
    assert color_channels(ChannelLayout(non_layer_planes=3, layer_masks=1), 4) == (4, False)


def test_color_channels_all_zero_uses_planes():
    assert color_channels(ChannelLayout(), 3) == (3, False)


def test_preview_rgb_swaps_to_bgra():
    image = _image(2, 1, 3, [10, 20, 30, 40, 50, 60])
    out = preview_bgra(image, ChannelLayout(layer_planes=3))
    assert (out.width, out.height, out.channels) == (2, 1, 4)
    assert bytes(out.data) == bytes([30, 20, 10, 255, 60, 50, 40, 255])


def test_preview_rgba_keeps_alpha():
    image = _image(1, 1, 4, [1, 2, 3, 4])
    out = preview_bgra(image, ChannelLayout(layer_planes=3, transparency_mask=1))
    assert bytes(out.data) == bytes([3, 2, 1, 4])


def test_preview_grey_is_opaque():
    image = _image(2, 2, 1, [7, 8, 9, 10])
    out = preview_bgra(image, ChannelLayout(layer_planes=1))
    assert bytes(out.data[:8]) == bytes([7, 7, 7, 255, 8, 8, 8, 255])
    assert out.data[3::4] == bytearray([255] * 4)


def test_preview_16_bit_full_scale_maps_to_255():
    image = _image(1, 1, 3, [32768, 0, 32768], bytes_per_channel=2)
    out = preview_bgra(image, ChannelLayout(layer_planes=3))
    assert bytes(out.data) == bytes([255, 0, 255, 255])


def test_preview_four_colour_channels_left_blank():
    image = _image(1, 1, 4, [1, 2, 3, 4])
    out = preview_bgra(image, ChannelLayout(layer_planes=4))
    assert bytes(out.data) == bytes(4)


def test_preview_of_view_uses_view_origin():
    image = _image(2, 1, 3, [10, 20, 30, 40, 50, 60])
    out = preview_bgra(image.view(1, 0), ChannelLayout(layer_planes=3))
    assert bytes(out.data) == bytes([60, 50, 40, 255])


def test_preview_rejects_bad_sample_size():
    image = IntImage(1, 1, 4, 1)
    with pytest.raises(ImageError):
        preview_bgra(image, ChannelLayout(layer_planes=1))


def test_source_mask_without_mask_selects_marquee_only():
    mask = source_mask(4, 3, None, (1, 1, 2, 3))
    assert mask[1, 1] == 0xFF and mask[2, 1] == 0xFF
    assert mask[0, 0] == 0 and mask[3, 1] == 0 and mask[1, 2] == 0
    assert sum(1 for b in mask.data if b) == 2


def test_source_mask_without_marquee_selects_everything():
    mask = source_mask(3, 2)
    assert bytes(mask.data) == b"\xff" * 6


def test_source_mask_copies_given_mask():
    raw = bytes([1, 2, 3, 4, 5, 6])
    mask = source_mask(3, 2, raw)
    assert bytes(mask.data) == raw


def test_source_mask_with_padded_stride():
    raw = bytes([1, 2, 0, 3, 4, 0])
    mask = source_mask(2, 2, raw)
    assert mask.stride_bytes == 3
    assert [mask[x, y] for y in range(2) for x in range(2)] == [1, 2, 3, 4]


def test_source_mask_rejects_short_buffer():
    with pytest.raises(ValueError):
        source_mask(3, 2, bytes(4))