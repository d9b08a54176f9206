"""Soft masks: either a mask dictionary over a transparency group, or a mask image."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Optional, Union

from .imageinfo import ImageInfo, image_props
from .protection import PDFProtection

__all__ = ["SMaskSubtype", "SMaskOptions", "SMask", "SMaskMap"]


class SMaskSubtype(str, Enum):
    """Subtypes of a soft mask dictionary."""

    ALPHA = "/Alpha"
    LUMINOSITY = "/Luminosity"


def _text(value: Union[str, SMaskSubtype]) -> str:
    return value.value if isinstance(value, Enum) else str(value)


@dataclass(frozen=True)
class SMaskOptions:
    """What identifies a cached soft mask."""

    transparency_xobject_group_index: int = 0
    subtype: Union[str, SMaskSubtype] = SMaskSubtype.ALPHA

    def key(self) -> str:
        """Cache key of the mask."""
        return f"S_{_text(self.subtype)};G_{self.transparency_xobject_group_index}_0_R"


@dataclass
class SMask:
    """A soft mask object."""

    info: ImageInfo = field(default_factory=ImageInfo)
    data: bytes = b""
    protection: Optional[PDFProtection] = None
    index: int = 0
    transparency_xobject_group_index: int = 0
    s: Union[str, SMaskSubtype] = ""

    type_name = "Mask"

    def write(self, stream: BinaryIO, obj_id: int) -> None:
        """Write the mask object."""
        if self.transparency_xobject_group_index != 0:
            stream.write(
                (
                    "<<\n"
                    "\t/Type /Mask\n"
                    f"\t/S {_text(self.s)}\n"
                    f"\t/G {self.transparency_xobject_group_index + 1} 0 R\n"
                    ">>\n"
                ).encode("latin-1")
            )
            return

        stream.write(image_props(self.info, False).encode("latin-1"))
        stream.write(f"/Length {len(self.data)}\n>>\n".encode("ascii"))
        stream.write(b"stream\n")
        if self.protection is not None:
            stream.write(self.protection.encrypt(obj_id, self.data))
            stream.write(b"\n")
        else:
            stream.write(self.data)
        stream.write(b"\nendstream\n")


class SMaskMap:
    """Thread-safe cache of soft masks by key."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._table: dict[str, SMask] = {}

    def find(self, options: SMaskOptions) -> Optional[SMask]:
        """Return the mask cached for ``options``, or None."""
        with self._lock:
            return self._table.get(options.key())

    def save(self, key: str, smask: SMask) -> SMask:
        """Store ``smask`` under ``key`` and return it."""
        with self._lock:
            self._table[key] = smask
        return smask

    def __len__(self) -> int:
        with self._lock:
            return len(self._table)