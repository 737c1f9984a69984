'''
Machinery turning the body of a Chunk subclass into its layout.

Writing

    class DBFFieldDescriptor(Chunk):
        field_name = fields.CStringField(11)
        data_type  = fields.StructField('c')

MetaChunk records ['field_name', 'data_type'] in DBFFieldDescriptor._meta.fields,
in the order they appear, and replaces each attribute with a FieldDescriptor: the
declared field stays on the class as a template, and each descriptor read from a
stream gets private copies of it.
'''
import copy
import logging
from enum import Enum, auto


logger = logging.getLogger(__name__)


class Endianess(Enum):
    '''Byte order used by StructField; dBase is little endian throughout.'''
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()


class FieldDescriptor(object):
    """Attribute of a Chunk class standing for one entry of its layout.

    Reading it from the class returns the template field (useful to inspect size
    and format without an instance), reading it from an instance returns that
    instance's own field, copied from the template on first access."""

    def __init__(self, field_instance: "Field", field_name: str):
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")
        self.template = field_instance
        self.template.name = field_name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self.template

        fields = instance.__dict__
        name = self.template.name

        if name not in fields:
            self.logger.debug("copying template of '%s' for %s", name, instance.__class__.__name__)
            fields[name] = self.template.create(father=instance)

        return fields[name]

    def __set__(self, instance, value):
        '''Assigning a field replaces it, anything else becomes its value:

            descriptor.field_length = 10  # same as descriptor.field_length.value = 10
        '''
        name = self.template.name

        if isinstance(value, self.template.__class__):
            value.father = instance
            value.name = name
            instance.__dict__[name] = value
        else:
            self.__get__(instance).value = value


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        if getattr(cls, name, None) is not None:
            raise AttributeError(f'{cls.__name__} already has an entry named {name}')

        setattr(cls, name, FieldDescriptor(self, name))

    def create(self, father):
        '''A copy of the template belonging to father.'''
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class Meta(object):
    """What MetaChunk knows of a Chunk class: the names of its fields, in layout order."""

    def __init__(self):
        self.fields = []


class MetaChunk(type):

    def __new__(cls, names, bases, attrs):
        # the class is created empty and the body added one attribute at a time,
        # so that fields can be told apart from methods and constants
        module = attrs.pop('__module__')
        classcell = attrs.pop('__classcell__', None)

        new_attrs = {
            '__module__': module,
        }
        if classcell is not None:
            new_attrs['__classcell__'] = classcell
        new_cls = super(MetaChunk, cls).__new__(cls, names, bases, new_attrs)

        new_cls._meta = Meta()

        # a subclass (e.g. a descriptor with another name encoding) starts
        # with the layout of its parents
        for parent in [_ for _ in bases if isinstance(_, MetaChunk)]:
            for field_name in parent._meta.fields:
                setattr(new_cls, field_name, parent.__dict__[field_name])
                new_cls._meta.fields.append(field_name)

        for attr_name, attr in attrs.items():
            new_cls.add_to_class(attr_name, attr)

        return new_cls

    def add_to_class(cls, name, value):
        if not hasattr(value, 'contribute_to_chunk'):
            setattr(cls, name, value)
            return

        logger.debug('%s.%s is at position %d of the layout', cls.__name__, name, len(cls._meta.fields))
        cls._meta.fields.append(name)
        value.contribute_to_chunk(cls, name)
