'''
# dBase field descriptors

The header of a dBase (.dbf) table is a 32 bytes block followed by the list of
the descriptors of its columns, each one of 32 bytes, terminated by the byte 0x0d:

  .------------------------------.
  | table header (32 bytes)      |
  | field descriptor 1           |
  | field descriptor 2           |
    ...
  | field descriptor N           |
  | 0x0d                         |
  '------------------------------'

Here we handle the descriptors only, the table header and the records are someone
else's business.

The layout of a descriptor is the following

  offset  size  content
  ------  ----  -------
       0    11  name, terminated by the first zero byte
      11     1  data type (C, L, N, F, D, M)
      12     4  reserved
      16     1  field length (unsigned)
      17     1  decimal count (signed)
      18     2  reserved
      20     1  work area id
      21     2  reserved
      23     1  set fields flag
      24     7  reserved
      31     1  index field flag

The reserved regions are read (see the fields of the same name) but always written
as zeros.
'''
import logging
import warnings
from enum import Enum, auto
from typing import Iterator, NamedTuple, Optional

from ..core import Chunk
from .. import fields
from ..streams import Stream
from ..exceptions import (
    ChunkUnpackException,
    InvalidArgumentException,
    UnpackException,
    UnsupportedOperationException,
)
from .enum import DBFFieldType


logger = logging.getLogger(__name__)


class Outcome(Enum):
    FIELD       = auto()
    END_OF_LIST = auto()


class Decoded(NamedTuple):
    '''What decode() found in the stream: a descriptor or the end of the list.'''
    outcome: Outcome
    descriptor: Optional["DBFFieldDescriptor"] = None

    @property
    def is_end_of_list(self) -> bool:
        return self.outcome is Outcome.END_OF_LIST


class DBFFieldDescriptor(Chunk):
    '''Definition of a column of a dBase table.

    A descriptor is obtained in two ways:

     1. decoding it with decode(), that doesn't check anything unless a Compliant
        level is indicated
     2. creating an empty one and using the setters, in this order: set_name(),
        set_data_type(), set_field_length(), set_decimal_count(); each setter
        checks its argument against what was already set.
    '''
    TERMINATOR = b'\x0d'
    MAX_NAME_LENGTH = 10
    MAX_FIELD_LENGTH = 0xff
    MAX_DECIMAL_COUNT = 0x7f
    DATE_LENGTH = 8

    encoding = 'latin-1'

    field_name       = fields.CStringField(11)
    data_type        = fields.StructField('c', default=b'\x00', enum=DBFFieldType)
    reserved1        = fields.ReservedField(4, kind='intle')
    field_length     = fields.StructField('B')
    decimal_count    = fields.StructField('b')
    reserved2        = fields.ReservedField(2, kind='intle')
    work_area_id     = fields.ReservedField(1, kind='intle')
    reserved3        = fields.ReservedField(2, kind='intle')
    set_fields_flag  = fields.ReservedField(1, kind='intle')
    reserved4        = fields.ReservedField(7, kind='bytes')
    index_field_flag = fields.ReservedField(1, kind='intle')

    def __eq__(self, other):
        if not isinstance(other, DBFFieldDescriptor):
            return NotImplemented

        return (
            self.get_name() == other.get_name() and
            self.get_data_type() == other.get_data_type() and
            self.get_field_length() == other.get_field_length() and
            self.get_decimal_count() == other.get_decimal_count()
        )

    __hash__ = None

    def __str__(self):
        return '%s %s(%d,%d)' % (
            self.get_name(),
            self.data_type,
            self.get_field_length(),
            self.get_decimal_count(),
        )

    @classmethod
    def decode(cls, stream, **kwargs) -> Decoded:
        '''Read a descriptor from the stream.

        If the first byte is the terminator nothing else is read and the
        outcome is END_OF_LIST; otherwise exactly 32 bytes are consumed.
        The keyword arguments are passed to the constructor (e.g. compliant).'''
        wrapped = Stream.wrap(stream)
        try:
            try:
                first = wrapped.read_exactly(1)
            except UnpackException as e:
                raise ChunkUnpackException(*e.args, chain=['field_name']) from e

            if first == cls.TERMINATOR:
                logger.debug('end of the descriptors list found')
                return Decoded(Outcome.END_OF_LIST)

            wrapped.unread(first)

            descriptor = cls(**kwargs)
            descriptor.unpack(wrapped)
        finally:
            if wrapped is not stream:
                wrapped.close()

        return Decoded(Outcome.FIELD, descriptor)

    def encode(self) -> bytes:
        return self.pack()

    def validate(self) -> bool:
        length = self.get_field_length()
        decimal_count = self.get_decimal_count()

        return length > 0 and 0 <= decimal_count <= length

    # accessors

    def get_name(self) -> str:
        return self.field_name.value

    def get_data_type(self):
        '''The DBFFieldType, or the raw byte if it doesn't match any of them.'''
        return self.data_type.value

    def get_field_length(self) -> int:
        return self.field_length.value

    def get_decimal_count(self) -> int:
        '''Applies only to numeric types, zero for the others.'''
        return self.decimal_count.value

    # setters

    def set_name(self, name: str):
        if name is None:
            raise InvalidArgumentException('Field name cannot be None')

        if not isinstance(name, str) or not 0 < len(name) <= self.MAX_NAME_LENGTH:
            raise InvalidArgumentException(f'Field name should be of length 1-{self.MAX_NAME_LENGTH}')

        try:
            self.field_name.value = name
        except (UnicodeEncodeError, ValueError) as e:
            raise InvalidArgumentException(f"Field name '{name}' can't be encoded as {self.encoding}") from e

    def set_field_name(self, name: str):
        warnings.warn('set_field_name() is deprecated, use set_name()', DeprecationWarning, stacklevel=2)
        self.set_name(name)

    def set_data_type(self, data_type):
        '''One of C, L, N, F, D, M. A date is always 8 bytes long.

        Choosing D forces the length to 8 but leaves the decimal count alone:
        if it was set bigger than 8 before, the descriptor ends up with a decimal
        count greater than its length, so set the type first.'''
        data_type = DBFFieldType.from_value(data_type)

        if data_type is DBFFieldType.DATE:
            self.field_length.value = self.DATE_LENGTH

        self.data_type.value = data_type

    def set_field_length(self, length: int):
        '''To be called after set_data_type() and before set_decimal_count().'''
        if self.get_data_type() is DBFFieldType.DATE:
            raise UnsupportedOperationException('Cannot do this on a Date field')

        if not isinstance(length, int) or isinstance(length, bool):
            raise InvalidArgumentException(f'Field length should be an integer, not {length!r}')

        if length <= 0:
            raise InvalidArgumentException('Field length should be a positive number')

        if length > self.MAX_FIELD_LENGTH:
            raise InvalidArgumentException(f'Field length should be at most {self.MAX_FIELD_LENGTH}')

        self.field_length.value = length

    def set_decimal_count(self, size: int):
        '''To be called after set_field_length(): the check is done against the
        length set at the moment of the call.'''
        if not isinstance(size, int) or isinstance(size, bool):
            raise InvalidArgumentException(f'Decimal length should be an integer, not {size!r}')

        if size < 0:
            raise InvalidArgumentException('Decimal length should be a positive number')

        if size > self.get_field_length():
            raise InvalidArgumentException('Decimal length should be less than field length')

        if size > self.MAX_DECIMAL_COUNT:
            raise InvalidArgumentException(f'Decimal length should be at most {self.MAX_DECIMAL_COUNT}')

        self.decimal_count.value = size


def decode(stream, **kwargs) -> Decoded:
    return DBFFieldDescriptor.decode(stream, **kwargs)


def encode(descriptor: DBFFieldDescriptor) -> bytes:
    return descriptor.encode()


def read_field_descriptors(stream, **kwargs) -> Iterator[DBFFieldDescriptor]:
    '''Yield the descriptors until the terminator.

    The stream must be positioned at the first descriptor, i.e. just after
    the table header.'''
    wrapped = Stream.wrap(stream)
    try:
        while True:
            decoded = DBFFieldDescriptor.decode(wrapped, **kwargs)
            if decoded.is_end_of_list:
                return

            yield decoded.descriptor
    finally:
        if wrapped is not stream:
            wrapped.close()
