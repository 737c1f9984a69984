import io

import pytest

from dbfstruct.exceptions import UnpackException
from dbfstruct.streams import Stream


class TrickleIO(io.RawIOBase):
    """Returns a byte at a time, like a pipe would do."""

    def __init__(self, data):
        super().__init__()
        self._data = data

    def readable(self):
        return True

    def readinto(self, b):
        if not self._data:
            return 0
        b[0] = self._data[0]
        self._data = self._data[1:]
        return 1


def test_bytes_stream():
    stream = Stream(b'\x01\x02\x03\x04\x05')

    assert stream.read(1) == b'\x01'
    assert stream.read_exactly(2) == b'\x02\x03'
    assert stream.read() == b'\x04\x05'


def test_file_stream(tmp_path):
    path_data = tmp_path / 'data'
    path_data.write_bytes(b'\x01\x02\x03')

    with Stream(str(path_data)) as stream:
        assert stream.read_exactly(3) == b'\x01\x02\x03'
        obj = stream.obj

    assert obj.closed


def test_fileobj_is_not_closed():
    obj = io.BytesIO(b'\x01')

    with Stream(obj) as stream:
        assert stream.read(1) == b'\x01'

    assert not obj.closed


def test_wrong_object():
    with pytest.raises(ValueError):
        Stream(42)


def test_wrap():
    stream = Stream(b'')

    assert Stream.wrap(stream) is stream
    assert isinstance(Stream.wrap(b''), Stream)


def test_unread():
    stream = Stream(b'\x02\x03')

    first = stream.read(1)
    stream.unread(first)

    assert stream.read(1) == b'\x02'
    stream.unread(b'\x01\x02')
    assert stream.read_exactly(3) == b'\x01\x02\x03'


def test_read_exactly_short_reads():
    stream = Stream(TrickleIO(b'\x01\x02\x03\x04'))

    assert stream.read_exactly(3) == b'\x01\x02\x03'


def test_read_exactly_end_of_stream():
    stream = Stream(b'\x01\x02')

    with pytest.raises(UnpackException):
        stream.read_exactly(3)
