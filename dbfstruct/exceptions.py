class DbfStructException(Exception):
    '''Base class to extend in order to throw exception in dbfstruct.

    It takes an optional keyword argument that represents the chain of the
    layer that caused the exception.
    '''

    def __init__(self, *args, chain=None):
        self.chain = chain if chain is not None else []
        super().__init__(*args)


class UnpackException(DbfStructException):
    pass


class ChunkUnpackException(UnpackException):
    '''A field of the chunk failed to unpack, the chain tells which one.'''

    def __str__(self):
        path = '.'.join(reversed(self.chain))
        message = super().__str__()
        return f'{path}: {message}' if message else path


class InvalidArgumentException(DbfStructException, ValueError):
    '''A value refused by a mutator.'''
    pass


class UnsupportedOperationException(DbfStructException, NotImplementedError):
    '''The operation doesn't apply to the current state (e.g. the length of a date).'''
    pass
