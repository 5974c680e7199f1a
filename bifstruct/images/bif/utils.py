import bisect
import logging
from pathlib import Path
from typing import List, Optional

from .models import ImageEntry, ContainerIndex
from ...streams import Stream
from ...exceptions import IOException


logger = logging.getLogger(__name__)


def timestamp_ms(index: ContainerIndex, entry: ImageEntry) -> int:
    return entry.timestamp * index.timestamp_unit


def read_image(obj, entry: ImageEntry) -> bytes:
    '''Return the payload of the entry; obj can be an open Stream or
    anything a Stream can be built from.'''
    if isinstance(obj, Stream):
        with obj.jump(entry.offset):
            return obj.read(entry.size)

    with Stream(obj) as stream:
        stream.seek(entry.offset)
        return stream.read(entry.size)


def extract_image(stream, entry: ImageEntry, output) -> Path:
    output = Path(output)
    data = read_image(stream, entry)

    path = output / f'{entry.name}.jpg'
    try:
        output.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise IOException(f'failed to write image \'{path}\'') from e

    logger.debug(f'extracted {entry.size} bytes at 0x{entry.offset:x} into \'{path}\'')

    return path


def extract_images(index: ContainerIndex, output) -> List[Path]:
    with Stream(index.path) as stream:
        return [extract_image(stream, entry, output) for entry in index.entries]


def find_image(index: ContainerIndex, milliseconds: int) -> Optional[ImageEntry]:
    '''Return the image shown at the given time, i.e. the last one with a
    timestamp not after it. It relies on the timestamps being sorted, that
    is always the case for containers written by encode().'''
    times = [timestamp_ms(index, _) for _ in index.entries]
    position = bisect.bisect_right(times, milliseconds)

    return index.entries[position - 1] if position else None
