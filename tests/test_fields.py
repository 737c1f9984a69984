from enum import Enum, auto

import pytest

from dbfstruct.enum import Compliant
from dbfstruct.exceptions import UnpackException
from dbfstruct.fields import StructField, StringField, CStringField, ReservedField
from dbfstruct.meta import Endianess
from dbfstruct.streams import Stream


def test_structfield_conversion_raw_value():
    """Check that the attributes "value" and "raw" are the analogous
    of the integers and bytes representation for a field."""
    field = StructField('I')

    assert field.size == 4
    assert field.raw == b'\x00\x00\x00\x00'
    assert field.value == 0

    field.value = 0xcafe

    assert field.value == 0xcafe
    assert field.raw == b'\xfe\xca\x00\x00'
    assert field.packed == field.raw


def test_structfield_set_raw():
    field = StructField('I')

    field.raw = b'\x01\x02\x03\x04'
    assert field.value == 0x04030201


def test_structfield_signed_byte():
    field = StructField('b')

    field.raw = b'\xff'
    assert field.value == -1

    with pytest.raises(ValueError):
        field.value = 200


def test_structfield_enum():
    class DummyEnum(Enum):
        NONE = 0
        FIRST = auto()
        SECOND = auto()

    field = StructField('I', enum=DummyEnum, compliant=Compliant.ENUM)

    assert field.value == DummyEnum.NONE

    field.value = DummyEnum.SECOND

    assert field.value == DummyEnum.SECOND
    assert field.raw == b'\x02\x00\x00\x00'

    with pytest.raises(UnpackException):
        field.raw = b'\x04\x00\x00\x00'


def test_structfield_enum_not_compliant():
    """Without compliance the unknown values are kept as they are."""
    class DummyEnum(Enum):
        FIRST = 1

    field = StructField('B', enum=DummyEnum)

    field.raw = b'\x07'

    assert field.value == 7
    assert field.raw == b'\x07'


def test_structfield_unpack_short_stream():
    field = StructField('I')

    with pytest.raises(UnpackException):
        field.unpack(Stream(b'\x01\x02'))


def test_stringfield():
    field = StringField(0x10)

    assert field.size == 0x10
    assert len(field.raw) == field.size
    assert field.raw == b'\x00' * field.size

    with pytest.raises(ValueError):
        field.value = b'kebab'

    data = b''.join([bytes([_]) for _ in range(0x10)])

    field.value = data

    assert field.value == data
    assert field.raw == data


def test_cstringfield():
    field = CStringField(11)

    assert field.size == 11
    assert field.value == ''
    assert field.raw == b'\x00' * 11

    field.value = 'KEBAB'

    assert field.null_index == 5
    assert field.raw == b'KEBAB' + b'\x00' * 6

    with pytest.raises(ValueError):
        field.value = 'A' * 12


def test_cstringfield_unpack():
    """What follows the terminator is kept in raw but not packed."""
    field = CStringField(11)

    field.unpack(Stream(b'NAME\x00garbag'))

    assert field.value == 'NAME'
    assert field.null_index == 4
    assert field.raw == b'NAME\x00garbag'
    assert field.packed == b'NAME' + b'\x00' * 7


def test_cstringfield_without_terminator():
    field = CStringField(11)

    field.raw = b'ABCDEFGHIJK'

    assert field.value == 'ABCDEFGHIJK'
    assert field.null_index == 11
    assert field.packed == b'ABCDEFGHIJK'


def test_reservedfield():
    field = ReservedField(2, kind='intle')

    assert field.size == 2
    assert field.value == 0

    field.unpack(Stream(b'\xfe\xff'))

    assert field.value == -2
    assert field.raw == b'\xfe\xff'
    assert field.packed == b'\x00\x00'


def test_reservedfield_kinds():
    field = ReservedField(4, kind='uintle')
    field.raw = b'\x01\x02\x03\x04'

    assert field.value == 0x04030201

    field = ReservedField(3, kind='bytes')
    field.value = b'abc'

    assert field.value == b'abc'
    assert field.packed == b'\x00' * 3

    with pytest.raises(ValueError):
        field.raw = b'ab'


def test_structfield_big_endian():
    field = StructField('H', endianess=Endianess.BIG_ENDIAN)

    field.value = 0x0102

    assert field.raw == b'\x01\x02'

    field.raw = b'\xca\xfe'
    assert field.value == 0xcafe


def test_structfield_enum_compliant_logs(caplog):
    class DummyEnum(Enum):
        FIRST = 1

    field = StructField('B', enum=DummyEnum, compliant=Compliant.ENUM)

    with pytest.raises(UnpackException):
        field.raw = b'\x07'

    assert 'doesn\'t have element with value 7' in caplog.text


def test_cstringfield_undecodable(caplog):
    """Bytes not valid in the encoding are replaced in the text, kept in the slot."""
    field = CStringField(11, encoding='ascii')

    field.raw = b'CAF\xc9' + b'\x00' * 7

    assert field.value == 'CAF\ufffd'
    assert field.packed == b'CAF\xc9' + b'\x00' * 7
    assert 'is not ascii' in caplog.text


def test_reservedfield_repr():
    field = ReservedField(2, kind='intle')
    field.raw = b'\xff\xff'

    assert repr(field) == '<ReservedField(-1)>'


def test_reservedfield_set_integer():
    field = ReservedField(2, kind='intle')

    field.value = -2

    assert field.raw == b'\xfe\xff'
    assert field.value == -2
