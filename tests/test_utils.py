import pytest

from bifstruct import (
    decode,
    encode,
    extract_image,
    extract_images,
    find_image,
    read_image,
    timestamp_ms,
)
from bifstruct.exceptions import IOException
from bifstruct.streams import Stream


@pytest.fixture
def bif(tmp_path, jpegs):
    return encode(jpegs, tmp_path / 'index.bif', timestamp_interval=2, timestamp_unit=500)


def test_read_image(bif, jpegs):
    assert [read_image(bif.path, _) for _ in bif.entries] == jpegs


def test_read_image_keeps_stream_position(bif, jpegs):
    with Stream(bif.path) as stream:
        stream.seek(3)
        assert read_image(stream, bif.entries[1]) == jpegs[1]
        assert stream.tell() == 3


def test_read_image_truncated_container(tmp_path, bif):
    truncated = tmp_path / 'truncated.bif'
    truncated.write_bytes(bif.path.read_bytes()[:-1])

    with pytest.raises(IOException):
        read_image(truncated, bif.entries[-1])


def test_extract_image(tmp_path, bif, jpegs):
    output = tmp_path / 'out' / 'nested'

    with Stream(bif.path) as stream:
        path = extract_image(stream, bif.entries[2], output)

    assert path == output / 'frame_00000000000000002000.jpg'
    assert path.read_bytes() == jpegs[2]


def test_extract_images(tmp_path, bif, jpegs):
    output = tmp_path / 'frames'

    paths = extract_images(decode(bif.path), output)

    assert [_.name for _ in paths] == [
        'frame_00000000000000000000.jpg',
        'frame_00000000000000001000.jpg',
        'frame_00000000000000002000.jpg',
    ]
    assert [_.read_bytes() for _ in paths] == jpegs
    assert sorted(output.iterdir()) == paths


def test_extract_images_output_is_a_file(tmp_path, bif):
    output = tmp_path / 'frames'
    output.write_bytes(b'')

    with pytest.raises(IOException):
        extract_images(bif, output)


def test_timestamp_ms(bif):
    assert [timestamp_ms(bif, _) for _ in bif.entries] == [0, 1000, 2000]


@pytest.mark.parametrize('milliseconds,expected', [
    (-1, None),
    (0, 0),
    (999, 0),
    (1000, 1),
    (1500, 1),
    (2000, 2),
    (10 ** 9, 2),
])
def test_find_image(bif, milliseconds, expected):
    entry = find_image(bif, milliseconds)

    assert entry == (None if expected is None else bif.entries[expected])


def test_find_image_empty(tmp_path):
    bif = encode([], tmp_path / 'empty.bif')

    assert find_image(bif, 0) is None
