
from swfaction.actions.interfaces import IInstructionSequence

from zope.interface import implementer

@implementer(IInstructionSequence)
class InstructionSequence(object):
    """
    An ordered block of actions.

    Branches refer to their targets by index in the sequence that owns
    them. The structural edits below keep those indices pointing at
    the same actions.
    """

    def __init__(self, instructions=()):
        self.instructions = list(instructions)

    def __iter__(self):
        return iter(self.instructions)

    def __len__(self):
        return len(self.instructions)

    def __getitem__(self, index):
        return self.instructions[index]

    def __setitem__(self, index, instruction):
        """
        Replace an action. Indices do not move.

        Assigning to a slice removes the actions in it, then inserts
        the new ones in their place; branches are moved as for
        :meth:`pop` and :meth:`insert`.
        """
        if not isinstance(index, slice):
            self.instructions[index] = instruction
            return
        start, stop, step = index.indices(len(self.instructions))
        if step != 1:
            raise TypeError("cannot assign to an extended slice of a sequence")
        instructions = list(instruction)
        del self[start:max(start, stop)]
        for i, inst in enumerate(instructions):
            self.insert(start + i, inst)

    def __eq__(self, other):
        if isinstance(other, InstructionSequence):
            other = other.instructions
        if not isinstance(other, list):
            return False
        return self.instructions == other

    def __ne__(self, other):
        return not self == other

    __hash__ = None

    def __repr__(self):
        return "InstructionSequence(%r)" % (self.instructions,)

    def _branches(self):
        return [inst for inst in self.instructions
                if inst.jumplike and inst.target is not None]

    def _normalize(self, index):
        if index < 0:
            index += len(self.instructions)
        return index

    def add_instruction(self, instruction):
        """
        Add an action to the end of this block.
        """
        self.instructions.append(instruction)
        return instruction

    append = add_instruction

    def add_instructions(self, instructions):
        """
        Iterate over the given argument and add these actions,
        one by one, to this block.
        """
        for i in instructions:
            self.add_instruction(i)

    extend = add_instructions

    def emit(self, name, *a, **kw):
        """
        Emit an action by mnemonic, with given arguments.
        """
        from swfaction.actions.opcodes import get_instruction
        return self.add_instruction(get_instruction(name)(*a, **kw))

    def insert(self, index, instruction):
        """
        Insert an action before index. Branches aimed at or past index
        (the end of the block included) are moved along, so they still
        land on the same action.
        """
        index = min(max(self._normalize(index), 0), len(self.instructions))
        for branch in self._branches():
            if branch.target >= index:
                branch.target += 1
        self.instructions.insert(index, instruction)
        return instruction

    def pop(self, index=-1):
        """
        Remove and return the action at index. Branches aimed at it now
        land on the action that followed it.
        """
        index = self._normalize(index)
        instruction = self.instructions.pop(index)
        for branch in self._branches():
            if branch.target > index:
                branch.target -= 1
        return instruction

    def __delitem__(self, index):
        if isinstance(index, slice):
            for i in sorted(range(*index.indices(len(self))), reverse=True):
                self.pop(i)
        else:
            self.pop(index)

    def index(self, instruction):
        """
        Return the index of instruction, by identity.
        """
        for i, inst in enumerate(self.instructions):
            if inst is instruction:
                return i
        raise ValueError("%r is not in this sequence" % (instruction,))

    def remove(self, instruction):
        self.pop(self.index(instruction))

    def stack_depth(self):
        """
        Return the (final, maximum) stack depth of a straight run through
        this block, from the advisory stack effects.
        """
        depth = max_depth = 0
        for inst in self.instructions:
            pop, push = inst.stack_effect()
            depth += push - pop
            if depth > max_depth:
                max_depth = depth
        return depth, max_depth
