"""
The data types that can be pushed with ActionPush.
"""

import struct

from collections import namedtuple

class DataType(object):
    REVERSE_INDEX = {}
    def __init__(self, id, name, size):
        self.id = id
        self.name = name
        self.size = size
        DataType.REVERSE_INDEX[self.id] = self

    def __repr__(self):
        return "<DataType %s (%d)>" % (self.name, self.id)

    def read(self, bits):
        size = self.size
        if size == "Z":
            return bits.read_cstring()
        elif size == "!":
            return None
        elif size == "f":
            return bits.read_float(32)
        elif size == "d":
            # Two little-endian words, high word first.
            raw = bits.read_bytes(8)
            return struct.unpack("<d", raw[4:] + raw[:4])[0]
        elif size == "B":
            value = bits.read_int_value(8)
            if self is BOOLEAN and value in (0, 1):
                return bool(value)
            return value
        elif size == "l":
            return bits.read_int_value(32, signed=True, endianness="<")
        elif size == "H":
            return bits.read_int_value(16, endianness="<")

    def write(self, bits, value):
        size = self.size
        if size == "Z":
            bits.write_cstring(value)
        elif size == "f":
            bits.write_float(value, 32)
        elif size == "d":
            raw = struct.pack("<d", value)
            bits.write_bytes(raw[4:] + raw[:4])
        elif size == "B":
            bits.write_int_value(int(value), 8)
        elif size == "l":
            bits.write_int_value(value, 32, signed=True, endianness="<")
        elif size == "H":
            bits.write_int_value(value, 16, endianness="<")

    def text(self, value):
        if self in (NULL, UNDEFINED):
            return self.name
        elif self is STRING:
            return repr(value)
        elif self is BOOLEAN:
            if isinstance(value, bool):
                return "true" if value else "false"
            return "boolean(%d)" % (value,)
        elif self is REGISTER:
            return "r:%d" % (value,)
        elif self in (CONSTANT8, CONSTANT16):
            return "c:%d" % (value,)
        return repr(value)

STRING      = DataType(0, "string", "Z")
FLOAT       = DataType(1, "float", "f")
NULL        = DataType(2, "null", "!")
UNDEFINED   = DataType(3, "undefined", "!")
REGISTER    = DataType(4, "register", "B")
BOOLEAN     = DataType(5, "boolean", "B")
DOUBLE      = DataType(6, "double", "d")
INTEGER     = DataType(7, "integer", "l")
CONSTANT8   = DataType(8, "constant 8", "B")
CONSTANT16  = DataType(9, "constant 16", "H")

class PushValue(namedtuple("PushValue", "value type")):
    """
    A typed value pushed with ActionPush. FLOAT values are rounded to
    single precision, as they are stored.
    """
    __slots__ = ()

    def __new__(cls, value, type):
        if type is FLOAT:
            value = struct.unpack("<f", struct.pack("<f", value))[0]
        return super(PushValue, cls).__new__(cls, value, type)

    def __repr__(self):
        return "PushValue(%s)" % (self.type.text(self.value),)

_pytype_to_avm1 = {
    str:         STRING,
    int:         INTEGER,
    bool:        BOOLEAN,
    float:       DOUBLE,
}

def pytype_to_avm1(value):
    """
    Wrap a plain Python value, or NULL/UNDEFINED, in a PushValue.
    """
    if isinstance(value, PushValue):
        return value
    if value in (NULL, UNDEFINED):
        return PushValue(None, value)
    if value is None:
        return PushValue(None, NULL)
    try:
        return PushValue(value, _pytype_to_avm1[type(value)])
    except KeyError:
        raise TypeError("cannot push a value of type %s" % (type(value).__name__,))

def register(index):
    return PushValue(index, REGISTER)

def constant(index):
    """
    Reference the string at index in the current constant pool.
    """
    return PushValue(index, CONSTANT8 if index < 256 else CONSTANT16)
