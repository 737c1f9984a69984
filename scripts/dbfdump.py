#!/usr/bin/env python3
import sys
import os
import logging

from dbfstruct.streams import Stream
from dbfstruct.dbase import read_field_descriptors

if 'DEBUG' in os.environ:
    logging.basicConfig()
    logger = logging.getLogger('dbfstruct')
    logger.setLevel(logging.DEBUG)


# we don't interpret the table header, we only need to skip it
TABLE_HEADER_SIZE = 32


def usage(progname):
    print('usage: %s <dbf file>' % progname)
    sys.exit(1)


def dump_fields(descriptors):
    print(f'''  [Nr] Name        Type  Length  Decimal  Offset''')
    # the first byte of each record is the deletion flag
    offset = 1
    for idx, descriptor in enumerate(descriptors):
        print(f'''  [{idx: >2d}] {descriptor.get_name():<11} {descriptor.data_type!s:<5} {descriptor.get_field_length():>6}  {descriptor.get_decimal_count():>7}  {offset:>6}''')
        offset += descriptor.get_field_length()

    print(f'''Record size: {offset} (bytes)''')


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    path = sys.argv[1]

    with Stream(path) as stream:
        stream.read_exactly(TABLE_HEADER_SIZE)

        dump_fields(read_field_descriptors(stream))
