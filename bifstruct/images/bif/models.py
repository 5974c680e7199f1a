from dataclasses import dataclass
from pathlib import Path
from typing import Tuple


@dataclass(frozen=True)
class ImageEntry:
    '''Position of one image inside a container.

    The offset is absolute from the start of the file, the size is
    derived from the offset of the following entry.'''
    name: str
    timestamp: int
    offset: int
    size: int


@dataclass(frozen=True)
class ContainerIndex:
    path: Path
    version: int
    total_images: int
    timestamp_unit: int
    entries: Tuple[ImageEntry, ...] = ()
