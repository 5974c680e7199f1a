"""
# bifstruct: BIF thumbnail containers for humans.

A BIF file packs the still images of a video track, each one with its
timestamp, into a single container that can be accessed randomly.

Two basic main operations are defined for the format:

 1. decode(): read the binary data, validate it and build the index of the
    images contained (name, timestamp, offset and size of each one).

 2. encode(): lay out a new container from an ordered sequence of images.

The binary layout is described declaratively with chunks and fields, the
same machinery can be reused for other simple formats:

    class Entry(Chunk):
        timestamp    = fields.StructField('I')
        image_offset = fields.StructField('I')

where each field is unpacked in order of declaration, unless an explicit
offset is indicated.
"""
from .images.bif.codec import decode, encode
from .images.bif.models import ImageEntry, ContainerIndex
from .images.bif.utils import (
    extract_image,
    extract_images,
    find_image,
    read_image,
    timestamp_ms,
)
