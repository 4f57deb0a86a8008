"""
Errors raised while decoding and encoding action blocks.

Every error carries the byte offset and action code it concerns, when
they are known.
"""

class ActionError(Exception):
    """
    The base class for errors raised by the action codec.
    """

    def __init__(self, message, offset=None, opcode=None):
        super(ActionError, self).__init__(message)
        self.message = message
        self.offset = offset
        self.opcode = opcode

    def __str__(self):
        context = []
        if self.opcode is not None:
            context.append("opcode=0x%02X" % (self.opcode,))
        if self.offset is not None:
            context.append("offset=%d" % (self.offset,))
        if context:
            return "%s (%s)" % (self.message, ", ".join(context))
        return self.message

class UnknownOpcode(ActionError, KeyError):
    """
    The action code is not in the opcode table.

    The decoder recovers from this by keeping the action as an
    OpaqueInstruction.
    """

class TruncatedStream(ActionError, EOFError):
    """
    The stream ended before a declared length was satisfied.
    """

class InvalidBranchTarget(ActionError, ValueError):
    """
    A branch does not land on an instruction boundary.
    """

    def __init__(self, message, offset=None, opcode=None, target=None):
        super(InvalidBranchTarget, self).__init__(message, offset, opcode)
        self.target = target

class EncodeOverflow(ActionError, OverflowError):
    """
    An operand value cannot be represented in its field.

    index and offset are relative to the block holding the action;
    path lists the index of each enclosing container, then index.
    """

    def __init__(self, message, offset=None, opcode=None, index=None):
        super(EncodeOverflow, self).__init__(message, offset, opcode)
        self.index = index
        self.path = [index] if index is not None else []

    def __str__(self):
        text = super(EncodeOverflow, self).__str__()
        if len(self.path) > 1:
            text += " in nested action %s" % ("/".join(str(i) for i in self.path),)
        return text

class OpcodeTableFrozen(ActionError, RuntimeError):
    """
    The opcode table was changed after it was first used.
    """
