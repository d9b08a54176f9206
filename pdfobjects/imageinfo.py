"""Reading JPEG, PNG and GIF images into the data a PDF image XObject needs."""

from __future__ import annotations

import io
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

__all__ = [
    "DEVICE_GRAY",
    "ImageInfo",
    "ImageParseError",
    "parse_image",
    "parse_image_file",
    "parse_png",
    "image_props",
    "mask_image_props",
    "compress",
    "image_rect_to_size",
]

DEVICE_GRAY = "DeviceGray"

_PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
_PNG_IHDR = b"IHDR"

_PNG_COLOR_SPACES = {
    0: "DeviceGray",
    4: "DeviceGray",
    2: "DeviceRGB",
    6: "DeviceRGB",
    3: "Indexed",
}

_JPEG_COLOR_SPACES = {
    "L": "DeviceGray",
    "RGB": "DeviceRGB",
    "YCbCr": "DeviceRGB",
    "CMYK": "DeviceCMYK",
}


class ImageParseError(ValueError):
    """Raised when image data cannot be turned into a PDF image."""


@dataclass
class ImageInfo:
    """Everything needed to write an image XObject."""

    w: int = 0
    h: int = 0
    format_name: str = ""
    colspace: str = ""
    bits_per_component: str = ""
    filter: str = ""
    decode_parms: str = ""
    trns: bytes = b""
    smask: bytes = b""
    smask_obj_id: int = 0
    pal: bytes = b""
    device_rgb_obj_id: int = 0
    data: bytes = b""

    @property
    def is_indexed(self) -> bool:
        """True for palette images."""
        return self.colspace == "Indexed"

    @property
    def has_smask(self) -> bool:
        """True when a soft mask (alpha channel) was extracted."""
        return bool(self.smask)


class _Reader:
    """Sequential reader over bytes that raises on truncated data."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def read(self, size: int) -> bytes:
        if self._pos >= len(self._data):
            raise ImageParseError("unexpected end of PNG data")
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        if len(chunk) < size:
            raise ImageParseError("unexpected end of PNG data")
        return chunk

    def read_byte(self) -> int:
        return self.read(1)[0]

    def read_uint(self) -> int:
        return int.from_bytes(self.read(4), "big")

    def skip(self, size: int) -> None:
        self._pos += size


def compress(data: bytes) -> bytes:
    """Deflate ``data`` with zlib at the fastest level."""
    return zlib.compress(bytes(data), 1)


def _png_transparency(color_type: int, chunk: bytes, current: bytes) -> bytes:
    try:
        if color_type == 0:
            return bytes([chunk[1]])
        if color_type == 2:
            return bytes([chunk[1], chunk[3], chunk[5]])
    except IndexError as exc:
        raise ImageParseError("invalid tRNS chunk") from exc
    pos = chunk.find(b"\x00")
    if pos >= 0:
        return bytes([pos & 0xFF])
    return current


def _split_alpha(raw: bytes, width: int, height: int, color_type: int) -> tuple[bytes, bytes]:
    """Separate colour and alpha samples, keeping each row's filter byte in both."""
    channels = 2 if color_type == 4 else 4
    row_length = channels * width
    color = bytearray()
    alpha = bytearray()
    for row in range(height):
        start = (1 + row_length) * row
        scanline = raw[start:start + 1 + row_length]
        if len(scanline) < 1 + row_length:
            raise ImageParseError("image data is shorter than its dimensions")
        color.append(scanline[0])
        alpha.append(scanline[0])
        pixels = scanline[1:]
        if channels == 2:
            color += pixels[0::2]
            alpha += pixels[1::2]
        else:
            color += bytes(b for i, b in enumerate(pixels) if i % 4 != 3)
            alpha += pixels[3::4]
    return bytes(color), bytes(alpha)


def parse_png(data: bytes) -> ImageInfo:
    """Parse PNG bytes; the image data stays deflated for /FlateDecode."""
    reader = _Reader(bytes(data))
    if reader.read(8) != _PNG_MAGIC:
        raise ImageParseError("Not a PNG file")
    reader.skip(4)
    if reader.read(4) != _PNG_IHDR:
        raise ImageParseError("Incorrect PNG file")

    width = reader.read_uint()
    height = reader.read_uint()
    bpc = reader.read_byte()
    if bpc > 8:
        raise ImageParseError("16-bit depth not supported")

    color_type = reader.read_byte()
    colspace = _PNG_COLOR_SPACES.get(color_type)
    if colspace is None:
        raise ImageParseError("Unknown color type")
    if reader.read_byte() != 0:
        raise ImageParseError("Unknown compression method")
    if reader.read_byte() != 0:
        raise ImageParseError("Unknown filter method")
    if reader.read_byte() != 0:
        raise ImageParseError("Interlacing not supported")
    reader.skip(4)

    palette = b""
    trns = b""
    idat = bytearray()
    while True:
        length = reader.read_uint()
        chunk_type = reader.read(4)
        if chunk_type == b"PLTE":
            palette = reader.read(length)
            reader.skip(4)
        elif chunk_type == b"tRNS":
            trns = _png_transparency(color_type, reader.read(length), trns)
            reader.skip(4)
        elif chunk_type == b"IDAT":
            idat += reader.read(length)
            reader.skip(4)
        elif chunk_type == b"IEND":
            break
        else:
            reader.skip(length + 4)
        if length <= 0:
            break

    if colspace == "Indexed" and not palette.strip():
        raise ImageParseError("Missing palette")

    colors = 3 if colspace == "DeviceRGB" else 1
    info = ImageInfo(
        w=width,
        h=height,
        format_name="png",
        colspace=colspace,
        bits_per_component=str(bpc),
        filter="FlateDecode",
        trns=trns,
        pal=palette,
    )
    info.decode_parms = (
        f"/Predictor 15 /Colors  {colors} /BitsPerComponent {info.bits_per_component} "
        f"/Columns {width}"
    )

    if color_type >= 4:
        try:
            raw = zlib.decompress(bytes(idat))
        except zlib.error as exc:
            raise ImageParseError(f"invalid PNG image data: {exc}") from exc
        color, alpha = _split_alpha(raw, width, height, color_type)
        info.smask = compress(alpha)
        info.data = compress(color)
    else:
        info.data = bytes(idat)
    return info


def parse_image(data: bytes) -> ImageInfo:
    """Parse JPEG, PNG or GIF bytes; a GIF is converted to PNG first."""
    data = bytes(data)
    try:
        with Image.open(io.BytesIO(data)) as img:
            format_name = (img.format or "").lower()
            if format_name == "mpo":
                format_name = "jpeg"
            mode = img.mode
            width, height = img.size
            png_bytes = None
            if format_name == "gif":
                img.seek(0)
                img.load()
                buffer = io.BytesIO()
                img.save(buffer, "PNG")
                png_bytes = buffer.getvalue()
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageParseError(str(exc)) from exc

    if format_name == "jpeg":
        colspace = _JPEG_COLOR_SPACES.get(mode)
        if colspace is None:
            raise ImageParseError("color model not support")
        return ImageInfo(
            w=width,
            h=height,
            format_name="jpeg",
            colspace=colspace,
            bits_per_component="8",
            filter="DCTDecode",
            data=data,
        )
    if format_name == "png":
        return parse_png(data)
    if png_bytes is not None:
        return parse_image(png_bytes)
    raise ImageParseError(f"Image format {format_name} is not supported")


def parse_image_file(path: Union[str, Path]) -> ImageInfo:
    """Read an image file and parse it."""
    return parse_image(Path(path).read_bytes())


def _base_image_props(info: ImageInfo, color_space: str) -> str:
    lines = [
        "<<\n",
        "\t/Type /XObject\n",
        "\t/Subtype /Image\n",
        f"\t/Width {info.w}\n",
        f"\t/Height {info.h}\n",
    ]
    if info.is_indexed:
        size = len(info.pal) // 3 - 1
        lines.append(
            f"\t/ColorSpace [/Indexed /DeviceRGB {size} {info.device_rgb_obj_id + 1} 0 R]\n"
        )
    else:
        lines.append(f"\t/ColorSpace /{color_space}\n")
        if info.colspace == "DeviceCMYK":
            lines.append("\t/Decode [1 0 1 0 1 0 1 0]\n")
    lines.append(f"\t/BitsPerComponent {info.bits_per_component}\n")
    if info.filter.strip():
        lines.append(f"\t/Filter /{info.filter}\n")
    return "".join(lines)


def image_props(info: ImageInfo, split_mask: bool) -> str:
    """Dictionary entries of an image XObject (the dictionary is left open)."""
    text = _base_image_props(info, info.colspace)
    if info.decode_parms.strip():
        text += f"\t/DecodeParms <<{info.decode_parms}>>\n"
    if split_mask:
        return text
    if info.trns:
        values = "".join(f"\t\t{value} \t\t{value} " for value in info.trns)
        text += f"\t/Mask [{values}\t]\n"
    if info.has_smask:
        text += f"\t/SMask {info.smask_obj_id + 1} 0 R\n"
    return text


def mask_image_props(info: ImageInfo) -> str:
    """Dictionary entries of the gray soft-mask image belonging to ``info``."""
    return _base_image_props(info, DEVICE_GRAY) + (
        "\t/DecodeParms <<\n"
        "\t\t/Predictor 15\n"
        "\t\t/Colors 1\n"
        "\t\t/BitsPerComponent 8\n"
        f"\t\t/Columns {info.w}\n"
        "\t>>\n"
    )


def _div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


def image_rect_to_size(width: int, height: int) -> tuple[float, float]:
    """Default display size in points of an image of the given pixel size."""
    k = 1
    w = -128
    h = -128
    if w < 0:
        w = _div(_div(-width * 72, w), k)
    if h < 0:
        h = _div(_div(-height * 72, h), k)
    if w == 0:
        w = _div(h * width, height)
    if h == 0:
        h = _div(w * height, width)
    return float(w), float(h)