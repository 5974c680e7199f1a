'''
# Base Index Frames

Container used by set-top boxes to store the thumbnails of a video track
so that trick-play can show the frame nearest to a given time without
decoding the video itself.

The layout is very simple, everything is little-endian

  .-------------------------------.  0x00
  | magic                         |
  | version | count | multiplier  |
  | reserved                      |
  |-------------------------------|  0x40
  | (timestamp, offset) x count   |
  | (0xffffffff, end of file)     |
  |-------------------------------|
  | image #0                      |
  | image #1                      |
  |   ...                         |
  '-------------------------------'

The size of an image is not stored: it's the distance between its offset
and the one of the following entry, this is the reason of the last entry
(the sentinel) pointing at the end of the file.

The timestamps are multiplied by the "framewise separation" to obtain
milliseconds; a zero multiplier stands for 1000.
'''
import logging

from ...core import Chunk
from ... import fields
from ...exceptions import UnsupportedVersionException


logger = logging.getLogger(__name__)

MAGIC = b'\x89BIF\x0d\x0a\x1a\x0a'
VERSION = 0
HEADER_SIZE = 0x40
INDEX_ENTRY_SIZE = 0x08
SENTINEL = 0xffffffff
DEFAULT_TIMESTAMP_UNIT = 1000


class BIFHeader(Chunk):
    magic                = fields.StringField(8, default=MAGIC, is_magic=True)
    version              = fields.StructField('I', default=VERSION)
    total_images         = fields.StructField('I')
    framewise_separation = fields.StructField('I', default=DEFAULT_TIMESTAMP_UNIT)
    reserved             = fields.StringField(HEADER_SIZE - 0x14)

    def validate_version(self):
        if self.version.value != VERSION:
            logger.warning(f'version {self.version.value} is not supported')
            raise UnsupportedVersionException(
                f'can only parse version {VERSION} formats, not {self.version.value}')


class BIFIndexEntry(Chunk):
    '''An entry of the offset table, the image_offset is absolute.'''
    timestamp    = fields.StructField('I')
    image_offset = fields.StructField('I')

    def is_sentinel(self):
        return self.timestamp.value == SENTINEL


class BIFFile(Chunk):
    header = BIFHeader()
    index  = fields.ArrayField(BIFIndexEntry(), canary=lambda x: x.is_sentinel(), offset=HEADER_SIZE)
