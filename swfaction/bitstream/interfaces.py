
from zope.interface import Interface, Attribute

class IBitStream(Interface):
    byte_aligned = Attribute("Whether the cursor currently sits on a"
                             " byte boundary")

    bits_available = Attribute("The number of bits left in the BitStream")

    def read_bit():
        """
        Read a bit.
        """

    def write_bit(bit):
        """
        Write a bit.
        """

    def read_bits(length):
        """
        Read length bits.
        """

    def write_bits(bits):
        """
        Write an iterable of bits.
        """

    def read_byte():
        """
        Read a byte.
        """

    def write_byte(byte):
        """
        Write a byte.
        """

    def read_bytes(length):
        """
        Read length bytes and return them as a bytestring.
        """

    def write_bytes(bytes):
        """
        Write an iterable of bytes.
        """

    def read_int_value(length, signed=False, endianness=">"):
        """
        Read an integer that is length bits wide.
        """

    def write_int_value(value, length, signed=False, endianness=">"):
        """
        Write value as an integer that is length bits wide.

        Raises OverflowError if value does not fit.
        """

    def read_cstring():
        """
        Read a string ended with a NUL.
        """

    def write_cstring(string):
        """
        Write string followed by a NUL.
        """

    def read_stream(length):
        """
        Read length bytes and return them as a new IBitStream.
        """

    def __len__():
        """
        Return how many bits are in this stream.
        """

    def __iter__():
        """
        Iterate over the bits in the stream.
        """

    def seek(offset, whence):
        pass

    def tell():
        pass

    def serialize():
        """
        Return the contents of this stream as a bytestring.
        """
