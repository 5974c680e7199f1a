from bifstruct import decode
from bifstruct.cli import main


def test_encode_decode(tmp_path, jpegs_dir, capsys):
    bif_path = tmp_path / 'index.bif'
    output = tmp_path / 'out'

    assert main(['encode', str(jpegs_dir), str(bif_path), '--ti', '5', '--fs', '200']) == 0

    out = capsys.readouterr().out
    assert 'Number of images: 3' in out
    assert 'Timestamp Interval: 5' in out
    assert 'Framewise Separation: 200ms' in out

    bif = decode(bif_path)
    assert [_.timestamp for _ in bif.entries] == [0, 5, 10]

    assert main(['decode', str(bif_path), str(output)]) == 0

    out = capsys.readouterr().out
    assert 'BIF Version: 0' in out
    assert 'Finished.' in out

    extracted = sorted(output.iterdir())
    assert [_.name for _ in extracted] == [
        'frame_00000000000000000000.jpg',
        'frame_00000000000000001000.jpg',
        'frame_00000000000000002000.jpg',
    ]
    sources = sorted(jpegs_dir.glob('*.jpg'))
    assert [_.read_bytes() for _ in extracted] == [_.read_bytes() for _ in sources]


def test_encode_defaults(tmp_path, jpegs_dir):
    bif_path = tmp_path / 'index.bif'

    assert main(['encode', str(jpegs_dir), str(bif_path)]) == 0

    bif = decode(bif_path)
    assert bif.timestamp_unit == 1000
    assert [_.timestamp for _ in bif.entries] == [0, 1, 2]


def test_info(tmp_path, jpegs_dir, capsys):
    bif_path = tmp_path / 'index.bif'
    main(['encode', str(jpegs_dir), str(bif_path)])
    capsys.readouterr()

    assert main(['info', str(bif_path)]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[1] == 'Number of images: 3'
    assert lines[4].startswith('[0000] 0 ')
    assert lines[6].startswith('[0002] 2000 ')
    assert len(lines) == 7


def test_encode_not_a_directory(tmp_path, capsys):
    source = tmp_path / 'image.jpg'
    source.write_bytes(b'\xff\xd8')

    assert main(['encode', str(source), str(tmp_path / 'index.bif')]) == 1
    assert 'must be a directory' in capsys.readouterr().err


def test_decode_invalid_file(tmp_path, capsys):
    bif_path = tmp_path / 'index.bif'
    bif_path.write_bytes(b'\x00' * 0x48)

    assert main(['decode', str(bif_path), str(tmp_path / 'out')]) == 1
    assert 'error: bad magic' in capsys.readouterr().err
    assert not (tmp_path / 'out').exists()


def test_decode_missing_file(tmp_path, capsys):
    assert main(['info', str(tmp_path / 'missing.bif')]) == 1
    assert 'cannot open' in capsys.readouterr().err
