# usm2

An unsharp mask sharpening library for raster images. The blur is a recursive
(IIR) Gaussian approximation, so its cost does not grow with the radius. The
blur can run in gamma space, and sharpening strength can differ between
shadows, midtones, lights and highlights and between brightening and
darkening.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Overview

- `usm2.image`: `FloatImage`, an interleaved float32 image whose rows are
  padded to a multiple of four samples, and `IntImage`, an 8- or 16-bit
  integer image in a byte buffer that views can share. `FloatImage.copy_from`
  and `FloatImage.copy_to` move regions between the two; `copy_to` rounds
  half away from zero and caps at the sample maximum. Incompatible formats
  raise `ImageError`.
- `usm2.unsharp`: the filter itself. `unsharp_region` takes a `FloatImage`
  with values in `[0, 1]` and returns a sharpened copy. The building blocks
  `apply_gamma`, `blur_horizontal`, `blur_vertical`, `combine`,
  `noise_factor` and `IIRBlur` can also be used on their own. Each step takes
  an optional `stop` object with an `is_set()` method (a `threading.Event`
  will do), which raises `Cancelled` when set, and an optional `progress`
  callable that is called once per row or column processed.
- `usm2.preview`: building an 8-bit BGRA preview from image data
  (`preview_bgra`, `color_channels`, `ChannelLayout`) and building a
  one-byte selection mask with an optional marquee rectangle
  (`source_mask`).
- `usm2.viewport`: geometry of a zoomable, draggable preview pane
  (`paint_layout`, `PaintLayout`, `preview_size`, `drag_position`,
  `zoom_anchor`).
- `usm2.zoom`: `PreviewZoom`, 21 zoom steps from 0.38 to 3.59.
- `usm2.controls`: allowed ranges and mouse-wheel steps of the filter
  settings (`control_limit`, `ControlLimit`), and formatting and parsing of
  their text (`format_control_value`, `parse_control_value`,
  `parse_thread_count`).
- `usm2.helpers`: `clamp`, `align`, `rescale`, `round_half_away`,
  `scale_area`, `gettime`, and pixel converters (`blit_y_to_bgra`,
  `blit_rgb_to_bgra`, `blit_rgba_to_bgra`, `blit_16_to_8`).
- `usm2.strutil`: `replace_all` and `format_float`.

## Example

```python
import threading

import numpy as np
from usm2.image import FloatImage
from usm2.unsharp import Cancelled, unsharp_region

pixels = np.random.default_rng(0).random((64, 64, 3), dtype=np.float32)
image = FloatImage.from_array(pixels)

stop = threading.Event()
try:
    sharpened = unsharp_region(
        image,
        radius=2.0,
        amount_up=1.0,
        gamma=1.0,
        amount_down=1.0,
        threshold=0.0,
        shadow=1.0,
        midtone=1.0,
        light=1.0,
        high=1.0,
        stop=stop,
    )
except Cancelled:
    sharpened = None
else:
    print(sharpened.pixels().shape)
```

## What this package does not do

- It does not read or write image files; images go in and out as numpy
  arrays or byte buffers.
- It has no command-line tool and no graphical dialog. The preview, zoom and
  control modules compute layouts and values only; drawing them is left to
  the caller.
- It does not split large images into blocks or spread work over threads.
  `unsharp_region` processes a whole `FloatImage` at once in the calling
  thread.