#!/usr/bin/env python3
"""
Demo script rendering one map per generator.
"""

from pathlib import Path

import numpy as np

from py_mapgen.log_config import configure_logging
from py_mapgen.pipeline import MapRequest, RenderOptions, generate_map, render_map
from py_mapgen.core.render import encode_png


def describe(name, pixels, palette):
    """Print a short summary of a rendered map."""
    height, width = pixels.shape[:2]
    colors = pixels.reshape(-1, 4)
    water = np.isin(colors.view(np.uint32), palette.colors[:palette.land_start].view(np.uint32)).mean()
    ice = np.isin(colors.view(np.uint32), palette.colors[palette.ice_start:].view(np.uint32)).mean()
    print(f"{name:15s} {width}x{height}  water {water:5.1%}  ice {ice:5.1%}")


def main():
    """Render demo maps into ./demo_maps."""
    configure_logging(level="warning")

    output_dir = Path("demo_maps")
    output_dir.mkdir(exist_ok=True)

    print("py-mapgen render demo")
    print("=" * 40)

    requests = {
        "circle": MapRequest(seed="demo", generator="circle", height=240, width=480, iterations=1000),
        "circle-wrap": MapRequest(seed="demo", generator="impact-wrap", height=240, width=480, iterations=1000),
        "diamond-square": MapRequest(seed="demo", generator="diamond-square", height=257, width=257),
        "great-circle": MapRequest(seed="demo", generator="great-circle", height=160, width=320, iterations=1000),
    }
    options = RenderOptions(pct_water=40, pct_ice=8)

    for name, request in requests.items():
        grid = generate_map(request)
        pixels, palette = render_map(grid, options)
        describe(name, pixels, palette)
        (output_dir / f"{name}.png").write_bytes(encode_png(pixels))

    print(f"\nMaps written to {output_dir.resolve()}")


if __name__ == "__main__":
    main()
