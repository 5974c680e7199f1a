"""
Decoding and encoding of whole BIF containers.

Decoding goes through the BIFFile chunk and then folds the offset table into
ImageEntry instances; encoding writes the header and then interleaves the table
entries with the payloads, jumping ahead to write each image and coming back
to the table.
"""
import logging
from pathlib import Path
from typing import List, Sequence, Union

from . import (
    BIFFile,
    BIFHeader,
    BIFIndexEntry,
    DEFAULT_TIMESTAMP_UNIT,
    HEADER_SIZE,
    INDEX_ENTRY_SIZE,
    SENTINEL,
)
from .models import ImageEntry, ContainerIndex
from ...streams import Stream
from ...exceptions import CorruptIndexException, IOException


logger = logging.getLogger(__name__)

U32_MAX = 0xffffffff

Image = Union[bytes, bytearray, str, Path]


def image_name(milliseconds: int) -> str:
    return f'frame_{milliseconds:020d}'


def decode(path) -> ContainerIndex:
    '''Parse the container at the given path.

    It raises InvalidFormatException, UnsupportedVersionException,
    CorruptIndexException or IOException, never returning a partial index.'''
    path = Path(path)
    logger.debug(f'decoding \'{path}\'')

    bif = BIFFile(path)

    header = bif.header
    timestamp_unit = header.framewise_separation.value or DEFAULT_TIMESTAMP_UNIT

    entries: List[ImageEntry] = []
    previous = None
    # the array stops at the sentinel, that only bounds the size of the last image
    for pair in bif.index:
        if previous is not None:
            size = pair.image_offset.value - previous.image_offset.value
            if size <= 0:
                logger.warning(f'entry {len(entries) + 1} at 0x{pair.offset:x} goes backward')
                raise CorruptIndexException(
                    f'offset 0x{pair.image_offset.value:x} doesn\'t follow 0x{previous.image_offset.value:x}',
                    chain=[str(len(entries) + 1), 'index'])

            entries.append(ImageEntry(
                name=image_name(previous.timestamp.value * timestamp_unit),
                timestamp=previous.timestamp.value,
                offset=previous.image_offset.value,
                size=size,
            ))

        previous = pair

    if len(entries) != header.total_images.value:
        raise CorruptIndexException(
            f'the header declares {header.total_images.value} images but the index contains {len(entries)}',
            chain=['index'])

    logger.debug(f'decoded {len(entries)} images from \'{path}\'')

    return ContainerIndex(
        path=path,
        version=header.version.value,
        total_images=header.total_images.value,
        timestamp_unit=timestamp_unit,
        entries=tuple(entries),
    )


def load_image(image: Image) -> bytes:
    if isinstance(image, (bytes, bytearray)):
        return bytes(image)

    try:
        return Path(image).read_bytes()
    except OSError as e:
        raise IOException(f'could not read image \'{image}\'') from e


def _check_u32(what, value):
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f'{what} must be an integer, not {value!r}')
    if not 0 <= value <= U32_MAX:
        raise ValueError(f'{what} {value} doesn\'t fit 32 bits')


def _write_index_entry(stream, timestamp, offset):
    entry = BIFIndexEntry()
    entry.timestamp.value = timestamp
    entry.image_offset.value = offset
    entry.pack(stream)


def encode(images: Sequence[Image], output_path, timestamp_interval=1,
           timestamp_unit=DEFAULT_TIMESTAMP_UNIT) -> ContainerIndex:
    '''Write a new container with the images in the order they are passed.

    The images can be raw payloads or paths to files to read; the i-th one gets
    timestamp_interval * i as timestamp. The returned index describes the file
    just written, entries included.'''
    output_path = Path(output_path)
    payloads = [load_image(_) for _ in images]
    total_images = len(payloads)

    _check_u32('timestamp interval', timestamp_interval)
    _check_u32('timestamp unit', timestamp_unit)
    if total_images and timestamp_interval * (total_images - 1) >= SENTINEL:
        raise ValueError(f'the timestamp of the last image would exceed 0x{SENTINEL - 1:x}')

    for idx, payload in enumerate(payloads):
        if not payload:
            raise ValueError(f'image {idx} is empty')

    payload_start = HEADER_SIZE + INDEX_ENTRY_SIZE * (total_images + 1)
    _check_u32('end of file offset', payload_start + sum(len(_) for _ in payloads))

    header = BIFHeader()
    header.total_images.value = total_images
    header.framewise_separation.value = timestamp_unit

    logger.debug(f'encoding {total_images} images into \'{output_path}\', payload starting at 0x{payload_start:x}')

    entries: List[ImageEntry] = []
    unit = timestamp_unit or DEFAULT_TIMESTAMP_UNIT

    with Stream(output_path, flags='wb') as stream:
        header.pack(stream)
        stream.seek(HEADER_SIZE)

        current_offset = payload_start
        for idx, payload in enumerate(payloads):
            timestamp = timestamp_interval * idx
            _write_index_entry(stream, timestamp, current_offset)

            with stream.jump(current_offset):
                logger.debug(f'writing image {idx} ({len(payload)} bytes) at 0x{current_offset:x}')
                stream.write(payload)

            entries.append(ImageEntry(
                name=image_name(timestamp * unit),
                timestamp=timestamp,
                offset=current_offset,
                size=len(payload),
            ))
            current_offset += len(payload)

        _write_index_entry(stream, SENTINEL, current_offset)

    return ContainerIndex(
        path=output_path,
        version=header.version.value,
        total_images=total_images,
        timestamp_unit=unit,
        entries=tuple(entries),
    )
