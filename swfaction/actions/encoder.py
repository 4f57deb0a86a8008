"""
Serialize instruction sequences into action blocks.
"""

import logging
import struct

from swfaction.actions.constants import END_ACTION, SI16_MIN, SI16_MAX
from swfaction.actions.errors import ActionError, EncodeOverflow, InvalidBranchTarget
from swfaction.actions.interfaces import IContainer

logger = logging.getLogger(__name__)

class Encoder(object):
    """
    Encodes instruction sequences, bottom-up. The bodies of containers
    are encoded first, which fixes the size of every action; the branch
    displacements are then worked out from the branch target indices.
    """

    def encode(self, sequence):
        """
        Encode a top-level block, followed by the END action.
        """
        return self.encode_block(sequence) + struct.pack("<B", END_ACTION)

    def encode_block(self, sequence):
        """
        Encode the actions of sequence, without an END action.
        """
        containers = [inst for inst in sequence if IContainer.providedBy(inst)]
        try:
            for index, inst in enumerate(sequence):
                if not IContainer.providedBy(inst):
                    continue
                try:
                    inst.encoder_pass(self)
                except EncodeOverflow as e:
                    # Prefix the index of this container.
                    e.path.insert(0, index)
                    raise

            # Pass 1. Encode everything but branches, whose size does
            # not depend on their displacement.
            chunks, starts, offset = [], [], 0
            for index, inst in enumerate(sequence):
                if inst.jumplike:
                    inst.displacement = 0
                data = self.serialize(index, inst, offset)
                chunks.append(data)
                starts.append(offset)
                offset += len(data)
            starts.append(offset)

            # Pass 2. Patch up branches.
            for index, inst in enumerate(sequence):
                if not inst.jumplike:
                    continue
                target = inst.target
                if target is None or not 0 <= target <= len(sequence):
                    raise InvalidBranchTarget("%s at index %d has no valid target" % \
                                              (inst.name, index), starts[index],
                                              inst.opcode, target)
                displacement = starts[target] - starts[index + 1]
                if not SI16_MIN <= displacement <= SI16_MAX:
                    raise EncodeOverflow("%s at index %d is %d bytes away from its "
                                         "target" % (inst.name, index, displacement),
                                         starts[index], inst.opcode, index)
                inst.displacement = displacement
                chunks[index] = self.serialize(index, inst, starts[index])
        finally:
            for inst in containers:
                inst.block_data = None

        logger.debug("encoded %d actions into %d bytes", len(chunks), offset)
        return b"".join(chunks)

    def serialize(self, index, inst, offset):
        """
        Serialize one action. Values that do not fit their field are
        reported as EncodeOverflow, along with where the action is.
        """
        try:
            return inst.serialize()
        except ActionError:
            raise
        except (OverflowError, ValueError, struct.error) as e:
            raise EncodeOverflow("cannot encode %s at index %d: %s" % \
                                 (inst.name, index, e), offset, inst.opcode, index)

def encode(sequence):
    """
    Encode sequence into an action block, ended by an END action.

    >>> encode([])
    b'\\x00'
    """
    return Encoder().encode(sequence)
