import pytest

from dbfstruct.dbase import DBFFieldDescriptor, encode


@pytest.fixture
def dbf_path(tmp_path):
    '''A table with a dummy header, two columns and no records.'''
    columns = []
    for name, data_type, length in (('ID', 'N', 6), ('LABEL', 'C', 40)):
        descriptor = DBFFieldDescriptor()
        descriptor.set_name(name)
        descriptor.set_data_type(data_type)
        descriptor.set_field_length(length)
        columns.append(encode(descriptor))

    path = tmp_path / 'table.dbf'
    path.write_bytes(b'\x03' + b'\x00' * 31 + b''.join(columns) + DBFFieldDescriptor.TERMINATOR)

    return path
