
def hex_bytes(data):
    """
    Format data as space separated hex bytes.

    >>> hex_bytes(b"\\x96\\x02\\x00")
    '96 02 00'
    """
    return " ".join("%02X" % (b,) for b in bytearray(data))

def hexdump(data, offset=0, width=16):
    """
    Return the lines of a classic hex dump of data, with addresses
    starting at offset.
    """
    data = bytearray(data)
    lines = []
    for start in range(0, len(data), width):
        chunk = data[start:start+width]
        text = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in chunk)
        lines.append("%08x  %-*s  %s" % (offset + start, width * 3 - 1,
                                          hex_bytes(chunk), text))
    return lines
