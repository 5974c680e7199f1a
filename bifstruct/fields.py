"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable without need for relayouting.
"""
import logging
import struct

from .meta import FieldBase, Endianess
from .streams import Stream
from .exceptions import BIFException, InvalidFormatException


logger = logging.getLogger(__name__)


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, is_magic=False):
        super().__init__()
        self.name = name
        self.father = father
        self.default = default
        # an offset indicated at declaration time is absolute and survives relayouting
        self.fixed_offset = offset
        self.offset = offset
        self.endianess = endianess
        self.is_magic = is_magic

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.value)

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
    )

    def relayout(self, offset=0):
        self.offset = offset

        return self.size

    def pack(self, stream=None, relayout=True):
        stream = Stream(b'') if stream is None else stream

        if relayout:
            self.relayout(offset=stream.tell())

        logger.debug('packing field \'%s\' at offset 0x%x' % (self.name, stream.tell()))
        stream.write(self.raw)

        return stream

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.
    """

    def __init__(self, format, default=0, **kw):
        self.format = format
        super().__init__(default=default, **kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

    def get_format(self):
        return '%s%s' % ('<' if self.endianess == Endianess.LITTLE_ENDIAN else '>', self.format)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        try:
            return struct.pack(self.get_format(), self.value)
        except struct.error as e:
            raise ValueError(f'value {self.value!r} doesn\'t fit field \'{self.name}\' ({self.format})') from e

    def unpack(self, stream):
        raw = stream.read(self.size)
        self.value = struct.unpack(self.get_format(), raw)[0]


class StringField(Field):
    """Represent a contiguous chunk of bytes."""

    def __init__(self, n=None, **kw):
        if n is None and 'default' not in kw:
            raise ValueError("StringField must have 'n' or 'default' indicated!")

        self.length = n or len(kw['default'])

        super().__init__(**kw)

    def __len__(self):
        return self.length

    def value_from_default(self):
        return b'\x00' * self.length if not self.default else self.default

    def _get_size(self):
        return self.length

    def _get_raw(self) -> bytes:
        if len(self.value) != self.length:
            raise ValueError(f'field \'{self.name}\' can only contain {self.length} bytes, not {len(self.value)}')

        return self.value

    def unpack(self, stream):
        self.value = stream.read(self.length)

        if self.is_magic and self.value != self.default:
            logger.warning(f'the magic doesn\'t correspond: {self.value!r} != {self.default!r}')
            raise InvalidFormatException(f'bad magic {self.value!r}', chain=[])


class ArrayField(Field):
    '''Un/Pack an array of Chunks.

    You can indicate an explicit number of elements via the parameter named "n"
    or you can indicate with a callable returning True which element is the terminator
    for the list via the parameter named "canary"; the terminator is part of the array.
    '''

    def __init__(self, field_cls, n=0, canary=None, **kw):
        if not isinstance(n, int):
            raise ValueError('n is \'%s\' must be of the right type' % n.__class__.__name__)

        self.field_cls = field_cls
        self._n = n
        self._canary = canary

        super().__init__(**kw)

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def value_from_default(self):
        return [self.instance_element() for _ in range(self._n)]

    def _get_raw(self) -> bytes:
        return b''.join(element.raw for element in self.value)

    def _get_size(self):
        return sum(element.size for element in self.value)

    def relayout(self, offset=0):
        self.offset = offset
        size = 0
        for element in self.value:
            size += element.relayout(offset=offset + size)

        return size

    def pack(self, stream=None, relayout=True):
        stream = Stream(b'') if stream is None else stream

        if relayout:
            self.relayout(offset=stream.tell())

        for element in self.value:
            stream.seek(element.offset)
            element.pack(stream, relayout=False)

        return stream

    def instance_element(self):
        return self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy

    def unpack_element(self, idx, element, stream):
        element.offset = stream.tell()
        try:
            element.unpack(stream)
        except BIFException as e:
            e.chain.append(str(idx))
            raise

    def unpack(self, stream):
        self.value = []

        if self._canary is None:
            for idx in range(self._n):
                element = self.instance_element()
                self.unpack_element(idx, element, stream)
                self.value.append(element)
            return

        idx = 0
        while True:
            element = self.instance_element()
            self.unpack_element(idx, element, stream)
            self.value.append(element)
            logger.debug('unpacked element %d of \'%s\': %r' % (idx, self.name, element))

            if self._canary(element):
                break

            idx += 1

        self._n = len(self.value)
