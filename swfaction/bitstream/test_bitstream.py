import os

import pytest

from swfaction.bitstream import BitStream, IBitStream

def test_constructor():
    bits = BitStream("10")
    assert list(bits) == [True, False]

    bits = BitStream("10101100")
    assert list(bits) == [True, False, True, False, True, True, False, False]

    bits = BitStream("  1  ")
    assert len(bits) == 1

    bits = BitStream([True, False, True, False])
    assert str(bits) == "1010"

def test_cursor():
    bits = BitStream("01001101")
    assert bits.tell() == 0
    bits.seek(1, os.SEEK_END)
    assert bits.bits_available == 1
    assert bits.read_bit() == 1
    pytest.raises(IndexError, bits.read_bit)

    bits.seek(0)
    assert bits.bits_available == 8

    result = bits.read_bit()
    assert result == 0

    result = bits.read_bits(2)
    assert result == (True, False)

    bits.seek(1, os.SEEK_CUR)
    assert bits.bits_available == 4
    assert bits.read_bits(2) == (True, True)

    bits.seek(0)
    assert str(bits) == "01001101"

def test_adapt_bytes():
    bits = IBitStream(b"FWS")
    assert isinstance(bits, BitStream)
    assert bits.tell() == 0
    assert bits.bits_available == 24
    assert bits.read_bytes(3) == b"FWS"

    bits = IBitStream(bytearray(b"\x01\x02"))
    assert bits.read_int_value(16, endianness="<") == 0x0201

    # Already a stream.
    assert IBitStream(bits) is bits

def test_int_values():
    bits = BitStream()
    bits.write_int_value(0x1234, 16, endianness="<")
    bits.write_int_value(-2, 16, signed=True, endianness="<")
    bits.write_int_value(5, 3)
    bits.write_int_value(0, 5)
    assert bits.serialize() == b"\x34\x12\xfe\xff\xa0"

    bits.seek(0)
    assert bits.read_int_value(16, endianness="<") == 0x1234
    assert bits.read_int_value(16, signed=True, endianness="<") == -2
    assert bits.read_int_value(3) == 5

def test_int_value_overflow():
    bits = BitStream()
    pytest.raises(OverflowError, bits.write_int_value, 0x10000, 16)
    pytest.raises(OverflowError, bits.write_int_value, -1, 8)
    pytest.raises(OverflowError, bits.write_int_value, 0x8000, 16, True, "<")
    pytest.raises(OverflowError, bits.write_int_value, -0x8001, 16, True, "<")
    bits.write_int_value(-0x8000, 16, True, "<")
    assert bits.serialize() == b"\x00\x80"

def test_unaligned_bytes():
    bits = BitStream("1")
    bits.seek(0, os.SEEK_END)
    bits.write_byte(0xFF)
    bits.write_bytes(b"\x00")
    assert str(bits) == "1" + "11111111" + "00000000"

    bits.seek(1)
    assert bits.read_byte() == 0xFF
    assert bits.read_bytes(1) == b"\x00"

def test_cstring():
    bits = BitStream()
    bits.write_cstring("hello")
    bits.write_cstring(u"caf\xe9")
    bits.write_cstring(b"\xff\xfe".decode("utf8", "surrogateescape"))
    assert bits.serialize() == b"hello\0caf\xc3\xa9\0\xff\xfe\0"

    bits.seek(0)
    assert bits.read_cstring() == "hello"
    assert bits.read_cstring() == u"caf\xe9"
    assert bits.read_cstring().encode("utf8", "surrogateescape") == b"\xff\xfe"

def test_cstring_errors():
    pytest.raises(ValueError, BitStream().write_cstring, "a\0b")

    bits = IBitStream(b"no terminator")
    pytest.raises(IndexError, bits.read_cstring)

def test_floats():
    bits = BitStream()
    bits.write_float(1.5)
    bits.write_float(-0.25, 64)
    assert bits.serialize() == b"\x00\x00\xc0\x3f" + b"\x00\x00\x00\x00\x00\x00\xd0\xbf"

    bits.seek(0)
    assert bits.read_float() == 1.5
    assert bits.read_float(64) == -0.25

    pytest.raises(OverflowError, BitStream().write_float, 1e300)

def test_read_stream():
    bits = IBitStream(b"abcdef")
    bits.read_byte()
    sub = bits.read_stream(3)
    assert sub.tell() == 0
    assert sub.read_bytes(3) == b"bcd"
    assert bits.read_bytes(2) == b"ef"
    pytest.raises(IndexError, bits.read_stream, 1)

def test_flush():
    # Test when bits has no data.
    bits = BitStream("")
    bits.flush()
    assert str(bits) == ""
    assert bits.bits_available == 0

    # Test when cursor == 0
    bits = BitStream("1111")
    bits.seek(0)
    bits.flush()
    assert str(bits) == "11110000"
    assert bits.bits_available == 0

    # Test when already flush.
    bits = BitStream("11111111")
    bits.seek(0)
    bits.flush()
    assert str(bits) == "11111111"
    assert bits.bits_available == 0

def test_skip_flush():
    bits = BitStream("111")
    bits.seek(0)
    bits.skip_flush()
    assert bits.tell() == 0

    bits = BitStream("11110000 111")
    bits.seek(1, os.SEEK_CUR)
    bits.skip_flush()
    assert bits.tell() == 8
    assert bits.bits_available == 3

    bits.skip_flush()
    assert bits.tell() == 8
