"""
swfaction reads, edits and writes the AVM1 action blocks found in SWF
files.

>>> from swfaction import decode, encode, disassemble
>>> block = decode(b"\\x06\\x00")
>>> list(disassemble(block))
['0\\tplay']
>>> encode(block)
b'\\x06\\x00'
"""

from swfaction.actions import (ActionError, UnknownOpcode, TruncatedStream,
                               InvalidBranchTarget, EncodeOverflow, OpcodeTableFrozen,
                               InstructionSequence, get_instruction, register_opcode,
                               decode, encode, disassemble)

__version__ = "0.6"
