# dezoomify

A library for working with tiled, zoomable images. It reads the metadata that
zoomable image servers publish, lists the zoom levels that are available, and
gives the URL and canvas position of every tile in a level.

Supported formats:

- Zoomify (`dezoomify.zoomify`, `dezoomify.zoomify_properties`)
- krpano (`dezoomify.krpano`, `dezoomify.krpano_metadata`)
- IIPImage (`dezoomify.iipimage`)
- NYPL digital collections (`dezoomify.nypl`)
- Zoomify PFF servlets (`dezoomify.pff`, `dezoomify.pff_properties`)
- IIIF `info.json` descriptions (`dezoomify.iiif_info`, data model only)

## Installation

```
pip install .
```

Run the tests with:

```
pip install ".[test]"
pytest
```

## Usage

Every level object has a `tile_references()` method that returns a list of
`(url, position)` tuples, row by row, where `position` is a
`dezoomify.vec2d.Vec2d` giving the top-left pixel of the tile on the canvas.

### Zoomify

```python
from dezoomify.network import fetch_uri
from dezoomify.zoomify import load_from_properties

url = "http://images.example.com/picture/ImageProperties.xml"
levels = load_from_properties(url, fetch_uri(url, timeout=30))
for level in levels:
    print(level.size())

for url, position in levels[-1].tile_references():
    print(position, url)
```

`fetch_uri` downloads `http://` and `https://` URLs and reads anything else as
a local file path. Levels are ordered from the smallest to the full
resolution. An unreadable file raises `dezoomify.zoomify.ZoomifyError`.

### krpano

```python
from dezoomify.krpano import load_from_properties

levels = load_from_properties("http://images.example.com/pano.xml", xml_bytes)
for level in levels:
    print(level.name(), level.title(), level.size)
```

Cube images give one level per side. Relative tile URLs are resolved against
the address of the XML file. Parse errors raise `dezoomify.krpano.KrpanoError`.

### IIPImage

```python
from dezoomify.iipimage import iter_levels, metadata_uri

meta = metadata_uri("http://images.example.com/iipsrv.fcgi?FIF=image.tif&JTL=4,11")
levels = iter_levels(meta, fetch_uri(meta, timeout=30))
```

### NYPL

```python
from dezoomify.nypl import iter_levels, metadata_uri

meta = metadata_uri("https://digitalcollections.nypl.org/items/a14f3200-fac1-012f-f7a4-58d385a7bbd0")
levels = iter_levels(meta, fetch_uri(meta, timeout=30))
```

Tile positions take the tile overlap declared in the metadata into account.

### Zoomify PFF

The PFF servlet needs several requests. `PffDezoomer.zoom_levels` raises
`dezoomify.pff.NeedsData` carrying the URL it needs next:

```python
from dezoomify.network import fetch_uri
from dezoomify.pff import NeedsData, PffDezoomer

dezoomer = PffDezoomer()
uri, contents = start_uri, None
while True:
    try:
        levels = dezoomer.zoom_levels(uri, contents)
        break
    except NeedsData as request:
        uri = request.uri
        contents = fetch_uri(uri, timeout=30)
```

### IIIF info.json

`dezoomify.iiif_info.ImageInfo.from_dict` reads a decoded `info.json`
document. It reports the best quality and format to request
(`best_quality()`, `best_format()`), how the tile size is written in a URL
(`preferred_size_format()`), and the tile sizes and scale factors that can be
used (`tiles()`), taking the server profile's size limits into account.

### Tiles, file names and helpers

- `dezoomify.tile.Tile` wraps a Pillow image and its position on the canvas.
  `Tile.from_bytes` decodes downloaded tile data and `Tile.empty` makes a
  transparent placeholder.
- `dezoomify.vec2d.max_size_in_rect` gives the largest size a tile at a given
  position may have and still fit inside the canvas.
- `dezoomify.output_file.get_outname` picks a file name for the result: JPEG
  when both dimensions fit in 16 bits and PNG otherwise, with a numbered
  suffix if the file already exists. `reserve_output_file` creates the file
  and raises `FileExistsError` if it is already there.
- `dezoomify.json_utils.all_json` finds every brace-delimited JSON5 object in
  arbitrary text.

## What this package does not do

- It has no command-line program.
- It does not compute tile URLs for IIIF images; it only reads and interprets
  `info.json` descriptions.
- It does not download all the tiles of a level or write the assembled image;
  it gives the tile URLs, positions and building blocks (`fetch_uri`, `Tile`,
  `get_outname`) for doing so.