from enum import Enum

from ..exceptions import InvalidArgumentException


class DBFFieldType(bytes, Enum):
    '''Storage type of a column, as written in the descriptor (a single ASCII letter).

    Being also bytes, a member compares equal to its letter: DBFFieldType.DATE == b'D'.'''
    CHARACTER = b'C'
    LOGICAL   = b'L'
    NUMERIC   = b'N'
    FLOAT     = b'F'
    DATE      = b'D'
    MEMO      = b'M'

    @classmethod
    def from_value(cls, value) -> "DBFFieldType":
        '''Accepts a member, its letter as str or bytes, or its code as int.'''
        if isinstance(value, cls):
            return value

        try:
            if isinstance(value, str):
                value = value.encode('ascii')
            elif isinstance(value, int) and not isinstance(value, bool):
                value = bytes([value])

            return cls(value)
        except (ValueError, TypeError, UnicodeEncodeError):
            raise InvalidArgumentException(f'Unknown data type {value!r}')
