# pdfobjects

Low-level pieces for writing PDF files. Each object class has a
`write(stream, obj_id)` method. It writes that object's dictionary or stream
to a binary stream such as `io.BytesIO`. Object numbers and references are
plain integers that you supply.

## Modules

- `pdfobjects.protection`: the 40-bit RC4 standard security handler.
  - `PDFProtection.set_protection(permissions, user_pass, owner_pass)` computes
    `o_value`, `u_value`, `p_value` and `encryption_key`. An empty owner
    password is replaced by a random one.
  - `object_key(obj_id)` and `encrypt(obj_id, data)` give the per-object key
    and encrypt data with it.
  - The module also has `Permission` (an `IntFlag` with `PRINT`, `MODIFY`,
    `COPY` and `ANNOT_FORMS`) and the plain `rc4(key, data)` function.
- `pdfobjects.charmap`: `CharacterGlyphMap`, an insertion-ordered map from
  characters to glyph indexes.
  - Methods: `set`, `index`, `glyph`, `keys` and `values`.
  - It supports `in`, `len()` and iteration.
  - `index` and `glyph` raise `KeyError` for an unknown character.
- `pdfobjects.fontutil`:
  - `string_width(text, font_size, char_widths)` measures text from per-byte
    widths.
  - `read_short` and `read_ushort` read big-endian 16-bit values.
  - `create_embedded_font_subset_name(name)` builds a subset font name.
  - `parse_style(style)` maps a style string to a `PaintStyle`.
  - `TtfOption` holds the kerning, style and missing-glyph callbacks.
  - `default_glyph_substitute` is the default missing-glyph replacement, which
    substitutes a space.
- `pdfobjects.geometry`:
  - Classes: `Point`, `Rect`, `Box` and `PageOption` (with `is_empty()` and
    `has_trim_box()`).
  - Standard page sizes in points: `PAGE_SIZE_A4`, `PAGE_SIZE_LETTER`,
    `PAGE_SIZE_A3_LANDSCAPE` and the others.
- `pdfobjects.imageinfo`:
  - `parse_image(data)` and `parse_image_file(path)` read JPEG, PNG and GIF
    images into an `ImageInfo`. A GIF is converted to PNG first, and a PNG
    alpha channel is split into a soft mask.
  - `parse_png(data)` reads PNG data directly.
  - `image_props(info, split_mask)` and `mask_image_props(info)` return the
    image XObject dictionary entries as a string.
  - `compress(data)` deflates data.
  - `image_rect_to_size(width, height)` gives the default display size in
    points.
  - Problems are raised as `ImageParseError`. This includes 16-bit PNGs,
    interlaced PNGs, missing palettes and unsupported formats.
- `pdfobjects.transparency`:
  - `BlendMode` lists the blend modes, and `parse_blend_mode(name)` returns
    one by name. An empty name means `/Normal`. An unknown name raises
    `ValueError`.
  - `Transparency` raises `ValueError` for an alpha outside 0.0 to 1.0.
  - `TransparencyMap` is a thread-safe cache keyed by `Transparency.key()`.
- `pdfobjects.fontsubset`: builds the embedded TrueType subset stream.
  - `FontFileObj` takes a `TrueTypeData` (font bytes, `TableEntry` directory,
    loca offsets) and a `CharacterGlyphMap`.
  - It produces the glyph closure with composite components, the subset
    `glyf` and `loca` tables, and the font file (`make_font()`).
  - `write()` writes the result as a compressed stream, encrypted when a
    `PDFProtection` is given.
  - The module also has `check_sum` and `entry_selector`.
- `pdfobjects.smask`:
  - `SMask` objects are either a `/Mask` dictionary over a transparency group
    or a mask image.
  - `SMaskOptions` identifies a mask, and `SMaskSubtype` gives its subtype.
  - `SMaskMap` is a thread-safe cache of masks.
- `pdfobjects.subsetfont`: `SubsetFont`, the Type0 font object.
  - Characters are looked up through `CmapFormat4` and `CmapGroup`
    (format 12, also available as `glyph_index_format12`).
  - `add_chars(text)` records the characters used and substitutes missing
    glyphs through the `TtfOption` callbacks.
  - Widths, kerning and scaled metrics come from `FontMetrics`.
  - Lookups raise `GlyphNotFoundError` or `CharNotFoundError`.
- `pdfobjects.unicodemap`: `UnicodeMap` writes the `/ToUnicode` CMap stream
  for a `CharacterGlyphMap`.
- `pdfobjects.outline`: document outlines (bookmarks).
  - `OutlinesObj` takes a callable that stores an object and returns its
    zero-based position.
  - Items are `OutlineObj`, and `OutlineNode` together with
    `parse_outline_nodes` links nested items.
  - `encode_utf16_hex` encodes outline titles.
- `pdfobjects.objects`:
  - Object classes: `PageObj` (with `write_external_link` and
    `write_internal_link` for link annotations), `PagesObj`, `ProcSetObj`,
    `ImportedObj`, `PdfInfo`.
  - Records: `LinkOption`, `AnchorOption`, `RelateFont`, `RelateXObject` and
    `ExtGS`.
  - Helpers: `contains_family` and `contains_family_and_style`.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
import io

from pdfobjects.imageinfo import image_props, parse_image_file
from pdfobjects.objects import LinkOption, PageObj
from pdfobjects.protection import Permission, PDFProtection

protection = PDFProtection()
protection.set_protection(Permission.PRINT | Permission.COPY, b"password", b"secret")
encrypted = protection.encrypt(5, b"stream data")

info = parse_image_file("picture.png")
print(image_props(info, False))

out = io.BytesIO()
page = PageObj(contents="4 0 R", resources_relate="3 0 R", protection=protection)
page.write(out, 5)
page.write_external_link(out, LinkOption(x=10, y=800, w=100, h=20, url="https://example.com"), 6)
```

## What it does not do

The package does not assemble a whole PDF document. It writes no header,
cross-reference table or trailer, and it has no page-drawing or text-layout
API. It also does not read TrueType files. `TrueTypeData`, `FontMetrics`,
`CmapFormat4` and `CmapGroup` must be filled from a font that has already
been parsed elsewhere.