'''
Command line access to the BIF containers

 $ bif decode index.bif frames/
 $ bif encode frames/ index.bif --ti 10 --fs 1000
 $ bif info index.bif
'''
import argparse
import logging
import os
import sys
from pathlib import Path

from .exceptions import BIFException
from .images.bif.codec import decode, encode
from .images.bif.utils import extract_images, timestamp_ms


logger = logging.getLogger(__name__)


def dump_header(bif):
    print(f'BIF Version: {bif.version}')
    print(f'Number of images: {bif.total_images}')
    print(f'Framewise Separation: {bif.timestamp_unit}ms')


def dump_entries(bif):
    print(''' Idx  Timestamp (ms)          Offset      Size''')
    for idx, entry in enumerate(bif.entries):
        print(f'''[{idx:04d}] {timestamp_ms(bif, entry):<22d} 0x{entry.offset:08x} {entry.size:>8d}''')


def command_decode(args):
    bif = decode(args.bif_file)
    dump_header(bif)
    print('Generating images...')
    extract_images(bif, args.output)
    print('Finished.')


def command_encode(args):
    if not args.images.is_dir():
        raise NotADirectoryError(f'\'{args.images}\' must be a directory')

    jpegs = sorted(args.images.glob('*.jpg'))
    logger.debug(f'found {len(jpegs)} images in \'{args.images}\'')

    bif = encode(jpegs, args.bif_file, args.timestamp_interval, args.framewise_separation)
    print(f'BIF Version: {bif.version}')
    print(f'Number of images: {bif.total_images}')
    print(f'Timestamp Interval: {args.timestamp_interval}')
    print(f'Framewise Separation: {bif.timestamp_unit}ms')
    print('Finished.')


def command_info(args):
    bif = decode(args.bif_file)
    dump_header(bif)
    dump_entries(bif)


def get_parser():
    parser = argparse.ArgumentParser(prog='bif', description='Encode and decode BIF thumbnail containers')
    subparsers = parser.add_subparsers(dest='command', required=True)

    decode_parser = subparsers.add_parser('decode', help='extract the images contained in a BIF file')
    decode_parser.add_argument('bif_file', type=Path, help='(e.g. index.bif)')
    decode_parser.add_argument('output', type=Path, help='directory images will be saved to')
    decode_parser.set_defaults(func=command_decode)

    encode_parser = subparsers.add_parser('encode', help='pack the JPEG images of a directory into a BIF file')
    encode_parser.add_argument('images', type=Path, help='directory containing images to be indexed')
    encode_parser.add_argument('bif_file', type=Path, help='(e.g. index.bif)')
    encode_parser.add_argument(
        '--ti', dest='timestamp_interval', type=int, default=1,
        help='Timestamp interval between images (multiplied by the framewise separation value '
             'to determine timestamp values in milliseconds)')
    encode_parser.add_argument(
        '--fs', dest='framewise_separation', type=int, default=1000,
        help='Timestamp multiplier (in milliseconds)')
    encode_parser.set_defaults(func=command_encode)

    info_parser = subparsers.add_parser('info', help='dump the header and the index of a BIF file')
    info_parser.add_argument('bif_file', type=Path, help='(e.g. index.bif)')
    info_parser.set_defaults(func=command_info)

    return parser


def main(argv=None):
    logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)

    args = get_parser().parse_args(argv)

    try:
        args.func(args)
    except (BIFException, NotADirectoryError, ValueError) as e:
        logger.debug('command failed', exc_info=True)
        print(f'error: {e}', file=sys.stderr)
        return 1

    return 0
