"""
Parse action blocks into instruction sequences.

Decoding is done in two passes over each block. The first pass frames
the action records, decodes their operands and records the offset of
every action. The second pass turns each branch displacement into the
index of the action it lands on.

Offsets are byte positions in the data given to :meth:`Decoder.decode`,
for the actions of nested bodies as well.
"""

import logging

from swfaction.bitstream import BitStream, IBitStream
from swfaction.actions.constants import SHORT_ACTION_THRESHOLD, END_ACTION, LONG_HEADER_SIZE
from swfaction.actions.errors import UnknownOpcode, TruncatedStream, InvalidBranchTarget
from swfaction.actions.instructions import OpaqueInstruction
from swfaction.actions.interfaces import IContainer
from swfaction.actions.opcodes import opcodes
from swfaction.actions.sequence import InstructionSequence

logger = logging.getLogger(__name__)

class Decoder(object):
    """
    Decodes action blocks with the actions of table.

    Action codes missing from the table are kept as opaque actions and
    reported in ``diagnostics``, unless strict is set, in which case
    :class:`UnknownOpcode` is raised.
    """

    def __init__(self, table=None, strict=False):
        self.table = table if table is not None else opcodes
        self.strict = strict
        self.diagnostics = []

    def decode(self, data):
        """
        Decode a top-level action block, ended by an END action.
        """
        self.diagnostics = []
        bits = IBitStream(data)
        sequence = self.decode_block(bits)
        if bits.bits_available:
            logger.warning("ignoring %d bytes after the END action",
                           bits.bits_available // 8)
        logger.debug("decoded %d actions (%d unknown)",
                     len(sequence), len(self.diagnostics))
        return sequence

    def decode_block(self, bits, length=None):
        """
        Decode the actions at the cursor of bits. With a length, the
        block is a body of that many bytes; without one, it ends at
        the END action, which is consumed.
        """
        limit = None
        if length is not None:
            limit = (bits.tell() >> 3) + length

        sequence = InstructionSequence()
        targets, branches = {}, []
        while True:
            offset = bits.tell() >> 3
            if limit is not None and offset >= limit:
                break
            if bits.bits_available < 8:
                if limit is None:
                    raise TruncatedStream("action block ends without an END action", offset)
                raise TruncatedStream("body ends %d bytes early" % (limit - offset,), offset)
            code = bits.read_byte()
            if limit is None and code == END_ACTION:
                break
            inst = self.decode_instruction(bits, code, offset, limit)
            targets[offset] = len(sequence)
            sequence.append(inst)
            if inst.jumplike:
                branches.append((inst, bits.tell() >> 3))

        # The end of the block is a valid target too.
        targets[offset] = len(sequence)

        for inst, end in branches:
            destination = end + inst.displacement
            if destination not in targets:
                raise InvalidBranchTarget("%s lands on offset %d, which is not the start"
                                          " of an action" % (inst.name, destination),
                                          inst.offset, inst.opcode, destination)
            inst.target = targets[destination]

        logger.debug("decoded a block of %d actions, %d branches, at offset %d",
                     len(sequence), len(branches), offset)
        return sequence

    def decode_instruction(self, bits, code, offset, limit=None):
        """
        Decode the action with the given code, whose code byte was at
        offset and has just been read.
        """
        operands, length = BitStream(), 0
        if code >= SHORT_ACTION_THRESHOLD:
            if bits.bits_available < 16 or \
               (limit is not None and offset + LONG_HEADER_SIZE > limit):
                raise TruncatedStream("missing record length", offset, code)
            length = bits.read_int_value(16, endianness="<")
            end = offset + LONG_HEADER_SIZE + length
            if limit is not None and end > limit:
                raise TruncatedStream("action runs %d bytes past the end of its body" % \
                                      (end - limit,), offset, code)
            try:
                operands = bits.read_stream(length)
            except IndexError:
                raise TruncatedStream("record declares %d operand bytes, %d available" % \
                                      (length, bits.bits_available // 8), offset, code)

        try:
            descriptor = self.table.lookup(code)
        except UnknownOpcode as e:
            e.offset = offset
            if self.strict:
                raise
            self.diagnostics.append(e)
            logger.warning("%s, keeping it as an opaque action", e)
            inst = OpaqueInstruction(code, operands.serialize())
            inst.offset = offset
            return inst

        cls = self.table.instruction_class(descriptor)
        try:
            inst = cls.decode_operands(operands, descriptor, length)
        except IndexError:
            raise TruncatedStream("operands of %s end early" % (descriptor.mnemonic,),
                                  offset, code)
        operands.skip_flush()
        if operands.bits_available >= 8:
            inst.trailing = operands.read_bytes(operands.bits_available // 8)
        inst.offset = offset

        if IContainer.providedBy(inst):
            self.decode_bodies(bits, inst, limit)
        return inst

    def decode_bodies(self, bits, inst, limit=None):
        """
        Decode the bodies that follow a container record.
        """
        for name, size in zip(inst.block_names, inst.block_sizes()):
            offset = bits.tell() >> 3
            if bits.bits_available < size * 8 or \
               (limit is not None and offset + size > limit):
                raise TruncatedStream("%s of %s declares %d bytes, %d available" % \
                                      (name, inst.name, size, bits.bits_available // 8),
                                      offset, inst.opcode)
            setattr(inst, name, self.decode_block(bits, size))

def decode(data, strict=False):
    """
    Decode the action block in data and return an InstructionSequence.

    >>> decode(b"\\x06\\x00")
    InstructionSequence([<play (0x06)>])
    """
    return Decoder(strict=strict).decode(data)
