import io
import struct

import pytest
from PIL import Image

from bifstruct.images.bif import MAGIC, HEADER_SIZE, SENTINEL


def jpeg(color, size=(8, 8)):
    buffer = io.BytesIO()
    Image.new('RGB', size, color).save(buffer, format='JPEG')
    return buffer.getvalue()


def build_container(pairs, version=0, total_images=None, unit=1000, magic=MAGIC, payload=b''):
    '''Build a container by hand, pairs are the raw (timestamp, offset) of the table.'''
    total_images = len(pairs) - 1 if total_images is None else total_images
    header = magic + struct.pack('<III', version, total_images, unit)
    header += b'\x00' * (HEADER_SIZE - len(header))

    table = b''.join(struct.pack('<II', *_) for _ in pairs)

    return header + table + payload


@pytest.fixture
def jpegs():
    return [jpeg(_) for _ in ('red', 'green', 'blue')]


@pytest.fixture
def jpegs_dir(tmp_path, jpegs):
    folder = tmp_path / 'frames'
    folder.mkdir()
    # out of order on purpose, the encoding must sort them by name
    for name, data in zip(('0002.jpg', '0003.jpg', '0001.jpg'), jpegs):
        (folder / name).write_bytes(data)
    (folder / 'notes.txt').write_text('not an image')

    return folder


@pytest.fixture
def two_images_bif():
    '''Two one-byte images with timestamps 0 and 500.'''
    start = HEADER_SIZE + 8 * 3
    return build_container(
        [(0, start), (500, start + 1), (SENTINEL, start + 2)],
        payload=b'\xaa\xbb',
    )


@pytest.fixture
def make_container():
    return build_container
