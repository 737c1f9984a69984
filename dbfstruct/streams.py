import io
import logging

from .exceptions import UnpackException


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/file objects to
    uniform their properties: the codec only needs to read and write
    forward, never to seek.

    A path is opened (and closed) by the stream itself, bytes are wrapped
    into a BytesIO and any other object is used as it is, as long as
    it has a read() or a write() method.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self._owned = False
        self._pending = b''
        self.obj = obj

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, self.init_fileobj)

        init_method()

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.obj!r})>'

    def __getattr__(self, name):
        return getattr(self.obj, name)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        '''Only what we opened is closed.'''
        if self._owned:
            self.obj.close()
            self._owned = False

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        self.obj = open(self.obj, 'rb')
        self._owned = True

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def init_bytearray(self):
        self.obj = io.BytesIO(bytes(self.obj))

    def init_fileobj(self):
        if not (hasattr(self.obj, 'read') or hasattr(self.obj, 'write')):
            raise ValueError('\'%s\' is the wrong kind of object to use as stream' % self._type.__name__)

    @classmethod
    def wrap(cls, obj):
        '''Returns obj if it is already a Stream, a new Stream otherwise.'''
        return obj if isinstance(obj, cls) else cls(obj)

    def unread(self, data: bytes):
        '''Push back data so that the next read() returns it first.'''
        self._pending = data + self._pending

    def read(self, size=-1) -> bytes:
        pending, self._pending = self._pending, b''

        if size is None or size < 0:
            return pending + self.obj.read()

        if len(pending) >= size:
            self._pending = pending[size:]
            return pending[:size]

        return pending + self.obj.read(size - len(pending))

    def read_exactly(self, size: int) -> bytes:
        '''Read size bytes, looping on short reads (pipes and sockets
        return what they have). The end of the stream before size bytes
        is an unpack error.'''
        chunks = []
        missing = size
        while missing > 0:
            data = self.read(missing)
            if not data:
                break
            chunks.append(data)
            missing -= len(data)

        data = b''.join(chunks)

        if missing:
            raise UnpackException(
                'stream ended after %d bytes while reading %d' % (len(data), size),
                chain=[])

        return data

    def write(self, data):
        return self.obj.write(data)
