"""
Render instruction sequences as text, one line per action.
"""

from swfaction.actions import types_ as types
from swfaction.actions.instructions import ConstantPool, Push
from swfaction.actions.interfaces import IContainer

class Disassembler(object):
    """
    An iterable over the lines of a sequence's disassembly. Each
    iteration starts over, and the sequence is never changed.

    Lines are ``"<index>\\t<mnemonic text>"``. The bodies of containers
    follow them, indented by one tab per level; containers with more
    than one body print the name of each non-empty body first.
    """

    def __init__(self, sequence):
        self.sequence = sequence

    def __iter__(self):
        return self.dump_block(self.sequence, 0, None)

    def __str__(self):
        return "\n".join(self)

    def dump_block(self, sequence, depth, pool):
        indent = "\t" * depth
        for index, inst in enumerate(sequence):
            if isinstance(inst, ConstantPool):
                pool = inst.pool
            yield "%s%d\t%s" % (indent, index, self.instruction_text(inst, pool))

            if IContainer.providedBy(inst):
                named = inst.named_blocks()
                for name, block in named:
                    if len(named) > 1:
                        if not len(block):
                            continue
                        yield "%s\t%s:" % (indent, name)
                    for line in self.dump_block(block, depth + 1, pool):
                        yield line

    def instruction_text(self, inst, pool=None):
        if pool is None or not isinstance(inst, Push):
            return inst.to_mnemonic_text()
        values = []
        for value, type in inst.values:
            text = type.text(value)
            if type in (types.CONSTANT8, types.CONSTANT16) and value < len(pool):
                text += "=%r" % (pool[value],)
            values.append(text)
        return "%s %s" % (inst.name, ", ".join(values))

def disassemble(sequence):
    """
    Return a Disassembler over sequence.

    >>> from swfaction.actions.decoder import decode
    >>> list(disassemble(decode(b"\\x06\\x00")))
    ['0\\tplay']
    """
    return Disassembler(sequence)
