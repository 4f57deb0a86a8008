
import os
import struct

from swfaction.bitstream.interfaces import IBitStream

from zope.interface import implementer
from zope.component import provideAdapter

_FLOAT_CODES = {32: "f", 64: "d"}

@implementer(IBitStream)
class BitStream(object):
    """
    BitStream is a class for taking care of data structures that are
    bit-packed, like SWF. Bits are stored in a bytearray, most significant
    bit first, and the cursor is counted in bits.
    """

    def __init__(self, bits=""):
        """
        Constructor.

        >>> b1 = BitStream("101010")               # Strings are okay.
        >>> b2 = BitStream([1, 0, "1", "0", 1, 0]) # So are any iterable.
        >>> b3 = BitStream(0b101010)               # But not ints.
        Traceback (most recent call last):
          File "<stdin>", line 1, in <module>
        TypeError: 'int' object is not iterable
        """
        self.bytes = bytearray()
        self.len = 0
        self.cursor = 0
        for bit in bits:
            if bit == " ":
                continue
            self.write_bit(bit != "0" and bool(bit))
        self.cursor = 0

    @classmethod
    def from_bytes(cls, data):
        """
        Create a BitStream holding the bytestring data, with the
        cursor at the start.
        """
        bits = cls()
        bits.bytes = bytearray(data)
        bits.len = len(bits.bytes) * 8
        return bits

    # Cursor.

    def seek(self, offset, whence=os.SEEK_SET):
        """
        Standard file protocol *seek* method, in bits.

        Note that SEEK_END counts backwards from the end.
        """
        if whence == os.SEEK_SET:
            self.cursor = offset
        elif whence == os.SEEK_CUR:
            self.cursor += offset
        elif whence == os.SEEK_END:
            self.cursor = self.len - offset

    def tell(self):
        """
        Gets the current cursor position.
        """
        return self.cursor

    def skip_to_end(self):
        """
        Seek to the end of the stream.
        """
        self.cursor = self.len

    @property
    def bits_available(self):
        """
        The number of bits available in the stream to be read.
        """
        return self.len - self.cursor

    @property
    def byte_aligned(self):
        return self.cursor & 7 == 0

    def flush(self):
        """
        Zero-fill until we are aligned with byte boundaries,
        i.e until our length is a multiple of 8.
        This sets the cursor to the end of the stream.
        """
        self.skip_to_end()
        leftover = self.cursor & 7
        if leftover:
            self.zero_fill(8 - leftover)

    def skip_flush(self):
        """
        Align the cursor so that it is flush with the next
        byte, as in the cursor is a multiple of 8.

        If there are not enough bits left, do nothing.
        """
        leftover = self.cursor & 7
        if leftover and self.bits_available >= 8 - leftover:
            self.cursor += 8 - leftover

    def _need(self, length):
        if self.bits_available < length:
            raise IndexError("BitStream read beyond boundaries")

    def _grow(self, end):
        needed = (end + 7) // 8
        if needed > len(self.bytes):
            self.bytes.extend(bytes(needed - len(self.bytes)))
        if end > self.len:
            self.len = end

    # Bits.

    def read_bit(self):
        self._need(1)
        byte, bit = divmod(self.cursor, 8)
        self.cursor += 1
        return bool(self.bytes[byte] & (0x80 >> bit))

    def write_bit(self, value):
        self._grow(self.cursor + 1)
        byte, bit = divmod(self.cursor, 8)
        if value:
            self.bytes[byte] |= 0x80 >> bit
        else:
            self.bytes[byte] &= ~(0x80 >> bit) & 0xFF
        self.cursor += 1

    def read_bits(self, length):
        self._need(length)
        return tuple(self.read_bit() for _ in range(length))

    def write_bits(self, bits):
        for bit in bits:
            self.write_bit(bit)

    def zero_fill(self, length):
        """
        Write length zero bits, used for reserved fields.
        """
        self.write_bits([False] * length)

    # Bytes.

    def read_byte(self):
        if self.byte_aligned:
            self._need(8)
            self.cursor += 8
            return self.bytes[(self.cursor >> 3) - 1]
        return self.read_int_value(8)

    def write_byte(self, byte):
        if byte < 0:
            byte += 256
        if self.byte_aligned:
            self._grow(self.cursor + 8)
            self.bytes[self.cursor >> 3] = byte
            self.cursor += 8
        else:
            self.write_int_value(byte, 8)

    def read_bytes(self, length):
        self._need(length * 8)
        if self.byte_aligned:
            start = self.cursor >> 3
            self.cursor += length * 8
            return bytes(self.bytes[start:start + length])
        return bytes(self.read_byte() for _ in range(length))

    def write_bytes(self, data):
        data = bytes(data)
        if self.byte_aligned:
            start = self.cursor >> 3
            self._grow(self.cursor + len(data) * 8)
            self.bytes[start:start + len(data)] = data
            self.cursor += len(data) * 8
        else:
            for byte in data:
                self.write_byte(byte)

    # Numbers.

    def read_int_value(self, length, signed=False, endianness=">"):
        if endianness == "<":
            if length & 7:
                raise ValueError("You must have a length of a multiple of 8"
                                 " in order to read with endianness")
            value = int.from_bytes(self.read_bytes(length // 8), "little")
        else:
            value = 0
            for bit in self.read_bits(length):
                value = (value << 1) | bit
        if signed and length and value & (1 << (length - 1)):
            value -= 1 << length
        return value

    def write_int_value(self, value, length, signed=False, endianness=">"):
        if signed:
            low, high = -(1 << (length - 1)), (1 << (length - 1)) - 1
        else:
            low, high = 0, (1 << length) - 1
        if not low <= value <= high:
            raise OverflowError("%d does not fit in %d %s bits" % \
                                (value, length, "signed" if signed else "unsigned"))
        value &= (1 << length) - 1
        if endianness == "<":
            if length & 7:
                raise ValueError("You must have a length of a multiple of 8"
                                 " in order to write with endianness")
            self.write_bytes(value.to_bytes(length // 8, "little"))
        else:
            self.write_bits(bool(value & (1 << i)) for i in reversed(range(length)))

    def read_float(self, length=32, endianness="<"):
        code = endianness + _FLOAT_CODES[length]
        return struct.unpack(code, self.read_bytes(length // 8))[0]

    def write_float(self, value, length=32, endianness="<"):
        # struct raises OverflowError for values out of range.
        self.write_bytes(struct.pack(endianness + _FLOAT_CODES[length], value))

    # Strings.

    def read_cstring(self):
        """
        Read a string ended with a NUL, like a c-string.

        Undecodable bytes are kept as surrogate escapes, so writing the
        string back gives the original bytes.
        """
        if self.byte_aligned:
            start = self.cursor >> 3
            end = self.bytes.find(b"\0", start, self.len >> 3)
            if end < 0:
                raise IndexError("BitStream read beyond boundaries")
            data = self.read_bytes(end - start)
            self.cursor += 8
        else:
            data = bytearray()
            byte = self.read_byte()
            while byte != 0:
                data.append(byte)
                byte = self.read_byte()
        return bytes(data).decode("utf8", "surrogateescape")

    def write_cstring(self, string):
        if isinstance(string, str):
            string = string.encode("utf8", "surrogateescape")
        if b"\0" in string:
            raise ValueError("%r contains a NUL and cannot be written as"
                             " a c-string" % (string,))
        self.write_bytes(string + b"\0")

    def read_stream(self, length):
        """
        Read length bytes and return them as a new BitStream.
        """
        return type(self).from_bytes(self.read_bytes(length))

    def serialize(self):
        """
        Serialize bit array into a byte string. A trailing partial
        byte is padded with zero bits on the right.
        """
        return bytes(self.bytes[:(self.len + 7) // 8])

    def __len__(self):
        return self.len

    def __iter__(self):
        for i in range(self.len):
            yield bool(self.bytes[i >> 3] & (0x80 >> (i & 7)))

    def __str__(self):
        return "".join("1" if b else "0" for b in self)

    def __repr__(self):
        return "<BitStream '%s' pos=%d>" % (str(self)[:64], self.tell())

def bytes_to_bitstream(data):
    return BitStream.from_bytes(data)

provideAdapter(bytes_to_bitstream, [bytes],      IBitStream)
provideAdapter(bytes_to_bitstream, [bytearray],  IBitStream)
provideAdapter(bytes_to_bitstream, [memoryview], IBitStream)
