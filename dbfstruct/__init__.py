"""
# dbfstruct: dBase structures as Python classes.

A format is described declaring its components in order, as fields of a Chunk:

    class Entry(Chunk):
        name   = fields.CStringField(11)
        length = fields.StructField('B')

Two basic main operations are defined for a chunk and its fields:

 1. unpack(): reading the binary data from a stream and build a high-level
    representation of that. The stream is read forward only, each field knows
    how many bytes it needs.

 2. pack(): encode the high-level representation into binary data.

to these we add one more

 3. relayout(): assign to each field its offset inside the chunk; the result
    is the layout table of the format (see Chunk.layout).

A field has two binary representations: raw, the bytes as they are, and packed,
the bytes as we write them (reserved regions are read but written as zeros).
"""
