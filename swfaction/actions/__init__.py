"""
AVM1 actions, and the codec between action blocks and instruction
sequences.
"""

from swfaction.actions.errors import (ActionError, UnknownOpcode, TruncatedStream,
                                      InvalidBranchTarget, EncodeOverflow,
                                      OpcodeTableFrozen)
from swfaction.actions.sequence import InstructionSequence
from swfaction.actions.opcodes import (register_opcode, lookup, lookup_by_mnemonic,
                                       get_instruction)
from swfaction.actions.decoder import Decoder, decode
from swfaction.actions.encoder import Encoder, encode
from swfaction.actions.disassembler import Disassembler, disassemble
