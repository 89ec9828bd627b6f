"""Read zoomable image metadata and compute the tiles of each zoom level."""

__version__ = "0.1.0"