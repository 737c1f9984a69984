"""
Core module for the abstraction of a file format

"""
from typing import Tuple, List, Dict

from .fields import Field
from .enum import Compliant
from .meta import MetaChunk
from .streams import Stream
from .exceptions import (
    ChunkUnpackException,
    UnpackException,
)
from .properties import ChunkPhase


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: the fields declared
    in the body of a subclass, in order, are its layout.

        class Entry(Chunk):
            type   = fields.StructField('B')
            length = fields.StructField('H')

    A Chunk can contain sub-chunks. Passing a stream (or bytes, or a path) to the
    constructor unpacks the chunk from it.
    """

    def __init__(self, stream=None, **kwargs):
        super().__init__(**kwargs)

        if stream is None:
            self.relayout()
            return

        wrapped = Stream.wrap(stream)
        self.logger.debug('unpacking \'%s\' from %s' % (self.__class__.__name__, wrapped))
        try:
            self.unpack(wrapped)
        finally:
            if wrapped is not stream:
                wrapped.close()

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

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    def init(self):
        for _, field in self.get_fields():
            field.init()

    def _get_size(self):
        '''the size is not a parameter but is derived from the fields'''
        return sum(field.size for _, field in self.get_fields())

    def _get_raw(self):
        return b''.join(field.raw for _, field in self.get_fields())

    def _get_packed(self):
        value = b''
        for field_name, field_instance in self.get_fields():
            field_packed = field_instance.packed
            self.logger.debug("field '{}' packed={}".format(field_name, field_packed))
            value += field_packed

        return value

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        '''The table (offset, size) of each field.'''
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def relayout(self, offset=0):
        '''This method triggers the chunk's children to reset the offsets.

        It returns the size of the chunk.'''
        phase_old = self._phase
        self._phase = ChunkPhase.RELAYOUTING
        self.offset = offset

        size = 0
        for field_name, field_instance in self.get_fields():
            self.logger.debug('relayouting %s.%s' % (self.__class__.__name__, field_name))
            size += field_instance.relayout(offset=offset + size)

        self._phase = phase_old

        return size

    def unpack(self, stream):
        '''Read each field, in order, from the stream.

        The stream is consumed forward only: a field starts where the
        previous one ended, so there's no need to seek.

        If a field fails the exception is re-raised as ChunkUnpackException
        with the name of the field appended to its chain, so that the caller
        can know where the data is wrong.
        '''
        stream = Stream.wrap(stream)
        self._phase = ChunkPhase.UNPACKING

        for field_name, field in self.get_fields():
            self.logger.debug('unpacking %s.%s' % (self.__class__.__name__, field_name))

            try:
                field.unpack(stream)
            except UnpackException as e:
                chain = e.chain if isinstance(e, ChunkUnpackException) else []
                chain.append(field_name)
                raise ChunkUnpackException(*e.args, chain=chain) from e

        self.relayout(offset=self.offset or 0)
        self._phase = ChunkPhase.DONE

        if hasattr(self, 'validate'):
            ret = self.validate()
            if not ret:
                self.logger.warning(f'validation for \'{self.__class__.__name__}\' failed')
                if self.is_compliant(Compliant.RANGE):
                    raise ChunkUnpackException(f'{self.__class__.__name__} is out of range', chain=[])
