import copy
import logging
from enum import Enum, auto


logger = logging.getLogger(__name__)


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        if name in cls._meta.fields:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')

        self.name = name
        cls._meta.fields.append(name)
        # the class attribute is only the prototype, each chunk instance gets its own copy
        setattr(cls, name, self)

    def create(self, father):
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class Meta(object):
    """Class containing metadata about the abstraction"""

    def __init__(self):
        self.fields = []


class MetaChunk(type):

    def __new__(cls, names, bases, attrs):
        '''Collect the fields in order of declaration, the ones of the parents first.'''
        new_attrs = {_k: _v for _k, _v in attrs.items() if not isinstance(_v, FieldBase)}
        new_cls = super(MetaChunk, cls).__new__(cls, names, bases, new_attrs)

        new_cls._meta = Meta()

        # handle inheritance
        parents = [_ for _ in bases if isinstance(_, MetaChunk)]
        for parent in parents:
            for obj_name in parent._meta.fields:
                if obj_name not in new_cls._meta.fields:
                    new_cls._meta.fields.append(obj_name)

        for obj_name, obj in attrs.items():
            if isinstance(obj, FieldBase):
                new_cls.add_to_class(obj_name, obj)

        return new_cls

    def add_to_class(cls, name, value):
        logger.debug('contribute_to_chunk() found for field \'%s\'' % name)
        value.contribute_to_chunk(cls, name)
