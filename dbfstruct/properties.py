from enum import Enum, auto


class ChunkPhase(Enum):
    '''Enum to state the actual phase of a chunk'''
    INIT      = 0
    RELAYOUTING = auto()
    PACKING   = auto()
    UNPACKING = auto()
    DONE      = auto()


class PropertyDescriptor(object):
    """Typed attribute of a field, checked each time it is assigned.

        class StringField(Field):
            length = PropertyDescriptor('length', int)
    """

    def __init__(self, name: str, _type: type):
        self.name = name
        self.type = _type

    def __get__(self, instance, owner):
        if instance is None:
            return self

        data = instance.__dict__
        if self.name not in data:
            raise AttributeError(f"no '{self.name}' here!")

        return data[self.name]

    def __set__(self, instance, value):
        if not isinstance(value, self.type) or isinstance(value, bool):
            raise ValueError(f"A property must be of type {self.type.__name__}")

        instance.__dict__[self.name] = value
