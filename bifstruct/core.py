"""
Core module for the abstraction of a file format

"""
import logging
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import BIFException


logger = logging.getLogger(__name__)


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: its main attributes
    are offset and size that identify a Chunk.

    A Chunk can contain sub-chunks: the fields are declared as class attributes and
    each instance works on its own copy of them, in order of declaration.

    If the subclass defines a validate_<field name>() method it's called right after
    that field is unpacked, a validate() method is called at the end of the unpacking;
    both must raise if the unpacked data is not acceptable.
    """

    def __init__(self, obj=None, **kwargs):
        for field_name in self._meta.fields:
            self.__dict__[field_name] = getattr(self.__class__, field_name).create(father=self)

        super().__init__(**kwargs)

        # now we have setup all the fields necessary and we can unpack if
        # some data is passed with the constructor
        if obj is not None:
            with Stream(obj) as stream:
                logger.debug('unpacking \'%s\' from %s' % (self.__class__.__name__, stream))
                self.unpack(stream)
        else:
            self.relayout()

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def init(self):
        for _, field in self.get_fields():
            field.init()

    def _get_size(self):
        '''the size parameter MUST not be set but MUST be derived from the subchunks'''
        return sum(field.size for _, field in self.get_fields())

    def _get_raw(self) -> bytes:
        return b''.join(field.raw for _, field in self.get_fields())

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def relayout(self, offset=0):
        '''Reset the offsets of the children, one after the other, starting
        from the offset passed as argument. Fields with an offset fixed at
        declaration time stay where they are.'''
        self.offset = offset

        size = 0
        for field_name, field_instance in self.get_fields():
            field_offset = offset + size if field_instance.fixed_offset is None else field_instance.fixed_offset
            logger.debug('relayouting %s.%s at 0x%x' % (self.__class__.__name__, field_name, field_offset))
            size = field_offset - offset + field_instance.relayout(offset=field_offset)

        return size

    def pack(self, stream=None, relayout=True):
        '''Encode the chunk into the stream (a new bytes stream if None is passed),
        every field is written at its own offset.'''
        stream = Stream(b'') if stream is None else stream

        if relayout:
            self.relayout(offset=stream.tell())

        for field_name, field_instance in self.get_fields():
            stream.seek(field_instance.offset)
            logger.debug('packing %s.%s at offset 0x%08x' % (self.__class__.__name__, field_name, field_instance.offset))
            field_instance.pack(stream=stream, relayout=False)

        return stream

    def unpack(self, stream):
        '''Take the binary data and transform it in the representation given by
        the class this method is implemented.

        Passing a stream is mandatory since the sub-chunks can have offsets not
        contiguous so we need to jump back and forth.

        An exception raised by a field gets the name of the field appended to
        its chain while it propagates.
        '''
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            if field.fixed_offset is not None:
                stream.seek(field.fixed_offset)

            field.offset = stream.tell()
            logger.debug('unpacking %s.%s at offset 0x%x' % (self.__class__.__name__, field_name, field.offset))

            try:
                field.unpack(stream)

                check = getattr(self, f'validate_{field_name}', None)
                if check is not None:
                    check()
            except BIFException as e:
                e.chain.append(field_name)
                raise

        if hasattr(self, 'validate'):
            self.validate()
