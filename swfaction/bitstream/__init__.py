"""
A byte-array backed bit stream, used to read and write the
bit-packed structures found in SWF action records.
"""

from swfaction.bitstream.bitstream import BitStream
from swfaction.bitstream.interfaces import IBitStream

__all__ = ["BitStream", "IBitStream"]
