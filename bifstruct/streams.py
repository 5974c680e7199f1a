import io
import logging
import os
from contextlib import contextmanager

from .exceptions import IOException


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around path/bytes/file objects to
    uniform their properties: mainly we need a seek() able to jump
    back and forth and reads that fail loudly when the data is not there.

    It can be used as a context manager, in that case a file opened by
    the stream itself is closed on exit.'''
    def __init__(self, obj, flags='rb'):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self.flags = flags
        self.obj = obj
        self.path = None
        self.history = []
        self._owned = False

        if isinstance(obj, (str, os.PathLike)):
            self.init_path()
        elif isinstance(obj, (bytes, bytearray)):
            self.init_bytes()

    def __getattr__(self, name):
        if name == 'obj':
            raise AttributeError(name)
        return getattr(self.obj, name)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self.path or self.obj.__class__.__name__)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def init_path(self):
        '''We think this is a path'''
        self.path = self.obj
        logger.debug('opening path \'%s\' with flags \'%s\'' % (self.path, self.flags))
        try:
            self.obj = open(self.path, self.flags)
        except OSError as e:
            raise IOException(f'cannot open \'{self.path}\'') from e
        self._owned = True

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def close(self):
        if self._owned and not self.obj.closed:
            logger.debug('closing path \'%s\'' % self.path)
            self.obj.close()

    def seek(self, offset):
        if not isinstance(offset, int) or isinstance(offset, bool):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        try:
            self.obj.seek(offset)
        except (OSError, ValueError) as e:
            raise IOException(f'failed to seek at offset 0x{offset:x}') from e

        return self

    def tell(self):
        return self.obj.tell()

    def read(self, size):
        '''Read exactly size bytes, anything less is an error.'''
        offset = self.obj.tell()
        try:
            data = self.obj.read(size)
        except OSError as e:
            raise IOException(f'failed to read {size} bytes at offset 0x{offset:x}') from e

        if len(data) != size:
            raise IOException(f'short read at offset 0x{offset:x}: expected {size} bytes, got {len(data)}')

        return data

    def write(self, data):
        offset = self.obj.tell()
        try:
            return self.obj.write(data)
        except OSError as e:
            raise IOException(f'failed to write {len(data)} bytes at offset 0x{offset:x}') from e

    def save(self):
        self.history.append(self.obj.tell())

    def restore(self):
        old_seek = self.history.pop()
        self.seek(old_seek)

    @contextmanager
    def jump(self, offset):
        '''Move temporarily at the given offset, the original position is
        restored when leaving the block.'''
        self.save()
        try:
            self.seek(offset)
            yield self
        finally:
            self.restore()
