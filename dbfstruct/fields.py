"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable without need for relayouting.

Every field has two binary representations:

 - raw: the bytes as they are now, i.e. what was read from the stream
 - packed: the bytes written when packing; usually the same as raw, but a
   field can decide to normalize them (reserved regions are written zeroed)
"""
import logging
import struct
from enum import Enum

from bitstring import Bits

from .enum import Compliant
from .meta import FieldBase, Endianess
from .properties import ChunkPhase, PropertyDescriptor
from .exceptions import UnpackException


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, *args, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, compliant=Compliant.INHERIT):
        super().__init__()
        self._phase = ChunkPhase.INIT
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.endianess = endianess
        self.compliant = compliant

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def is_compliant(self, level):
        '''Returns True if this field or, following INHERIT, one of its fathers
        asks for the given level of compliance.'''
        instance = self
        while instance:
            if instance.compliant & level:
                return True
            if not instance.compliant & Compliant.INHERIT:
                break

            instance = instance.father

        return False

    def __set_offset(self, value):
        self.__offset = value

    def __get_offset(self):
        return self.__offset

    offset = property(__get_offset, __set_offset)

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_value(self):
        return self._value

    def _set_value(self, value) -> None:
        self._value = value

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    def _set_raw(self, value) -> None:
        raise NotImplementedError(f"method {self.__class__.__name__}._set_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
        fset=lambda self, value: self._set_raw(value),
    )

    def _get_packed(self) -> bytes:
        return self.raw

    packed = property(
        fget=lambda self: self._get_packed(),
    )

    def relayout(self, offset=0):
        self.offset = offset

        return self.size

    def pack(self, stream=None):
        '''Returns the bytes representing this field, writing them to the
        stream if one is passed.'''
        old_phase = self._phase
        self._phase = ChunkPhase.PACKING

        data = self.packed
        if stream is not None:
            stream.write(data)

        self._phase = old_phase

        return data

    def unpack(self, stream):
        '''Fields have a size known in advance: read exactly that many bytes.'''
        self._phase = ChunkPhase.UNPACKING
        self.raw = stream.read_exactly(self.size)
        self._phase = ChunkPhase.DONE


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.

    The main advantage is the possibility to indicate via the "enum" argument some subclass
    of enum.Enum so to have directly a representation of the value of the field itself;
    values without a member are kept as they are, unless Compliant.ENUM is requested.
    """

    def __init__(self, format, default=0, enum=None, **kw):
        self.format = format
        self.enum = enum
        super().__init__(default=default, **kw)

    def __repr__(self):
        if isinstance(self.value, int):
            return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

        return f'<{self.__class__.__name__}({self.value!r})>'

    def __str__(self):
        value = self.value.value if isinstance(self.value, Enum) else self.value
        if self.format == 'c':
            return value.decode('latin1')

        return str(value)

    def value_from_default(self):
        if not self.enum:
            return super().value_from_default()

        try:
            return self.enum(self.default)
        except ValueError:
            return self.default

    def get_format(self):
        return '%s%s' % ('<' if self.endianess == Endianess.LITTLE_ENDIAN else '>', self.format)

    def _to_struct(self, value):
        return value.value if isinstance(value, Enum) else value

    def _set_value(self, value) -> None:
        try:
            struct.pack(self.get_format(), self._to_struct(value))
        except struct.error as e:
            raise ValueError(f"'{value!r}' can't be represented by field '{self.name}': {e}") from e

        super()._set_value(value)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        return struct.pack(self.get_format(), self._to_struct(self.value))

    def _set_raw(self, raw: bytes) -> None:
        self._value = self._unpack(raw)

    def _unpack_struct(self, value: bytes):
        try:
            unpacked_value = struct.unpack(self.get_format(), value)[0]
        except struct.error as e:
            self.logger.error(e)
            raise UnpackException(str(e), chain=[]) from e

        return unpacked_value

    def _unpack_enum(self, value):
        try:
            return self.enum(value)
        except ValueError:
            self.logger.warning(f'enum {self.enum!r} doesn\'t have element with value {value!r} in it')

            if self.is_compliant(Compliant.ENUM):
                raise UnpackException(f'{self.enum.__name__} has no element {value!r}', chain=[])

            return value

    def _unpack(self, raw):
        value = self._unpack_struct(raw)
        if self.enum:
            value = self._unpack_enum(value)

        return value


class StringField(Field):
    """Represent a contiguous chunk of bytes."""

    length = PropertyDescriptor('length', int)

    def __init__(self, n=None, **kw):
        if n is None and 'default' not in kw:
            raise ValueError(f"StringField must have 'n' or 'default' indicated!")

        self.length = n or len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __len__(self):
        return self.length

    def value_from_default(self):
        return b'\x00' * self.length if not self.default else self.default

    def _get_size(self):
        return self.length

    def _set_value(self, value) -> None:
        if len(value) != self.length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        super()._set_value(bytes(value))

    def _get_raw(self):
        return self.value

    def _set_raw(self, raw):
        self.value = raw


class CStringField(StringField):
    """Text stored in a fixed size slot and terminated by the first zero byte.

    If the slot doesn't contain any zero byte the text takes the whole slot.

    The raw representation keeps whatever follows the terminator, the packed one
    is the text zero-filled up to the size of the slot. The encoding is the one
    of the father, if it indicates one; bytes that don't decode are replaced in
    the text but kept in the slot."""

    def __init__(self, n, encoding='latin-1', **kw):
        self.encoding = encoding
        self._slot = b'\x00' * n
        self.null_index = 0
        super().__init__(n=n, default='', **kw)

    def get_encoding(self):
        return getattr(self.father, 'encoding', None) or self.encoding

    def value_from_default(self):
        return self.default

    def _set_value(self, value) -> None:
        encoded = value.encode(self.get_encoding())

        if len(encoded) > self.length:
            raise ValueError(f"'{value}' doesn't fit into {self.length} bytes")

        self._slot = encoded.ljust(self.length, b'\x00')
        self.null_index = len(encoded)
        self._value = value

    def _get_raw(self):
        return self._slot

    def _set_raw(self, raw):
        if len(raw) != self.length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        null_index = raw.find(b'\x00')
        if null_index < 0:
            self.logger.debug('no terminator in %r, using the whole slot', raw)
            null_index = self.length

        self._slot = bytes(raw)
        self.null_index = null_index
        try:
            self._value = raw[:null_index].decode(self.get_encoding())
        except UnicodeDecodeError as e:
            self.logger.warning('%r is not %s: %s', raw[:null_index], self.get_encoding(), e)
            self._value = raw[:null_index].decode(self.get_encoding(), errors='replace')

    def _get_packed(self):
        return self._slot[:self.null_index].ljust(self.length, b'\x00')


class ReservedField(Field):
    """Region of the format without meaning for us but that we want to read anyway.

    The bytes are kept as they are read and "value" decodes them with the bitstring
    interpretation indicated by "kind" (e.g. 'intle', 'uintle' or 'bytes').
    When packing the region is always zero-filled."""

    def __init__(self, n, kind='uintle', **kw):
        self.length = n
        self.kind = kind
        self._raw = b'\x00' * n
        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def init(self):
        self._raw = b'\x00' * self.length

    def _get_size(self):
        return self.length

    def _get_value(self):
        return getattr(Bits(self._raw), self.kind)

    def _set_value(self, value) -> None:
        if self.kind == 'bytes':
            self.raw = Bits(bytes(value)).bytes
        else:
            self.raw = value.to_bytes(self.length, 'little', signed=self.kind == 'intle')

    def _get_raw(self):
        return self._raw

    def _set_raw(self, raw):
        if len(raw) != self.length:
            raise ValueError(f'reserved region is {self.length} bytes, not {len(raw)}')

        self._raw = bytes(raw)

    def _get_packed(self):
        return b'\x00' * self.length
