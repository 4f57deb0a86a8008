
from zope.interface import Interface, Attribute

class IInstruction(Interface):
    """
    A single action record.
    """
    opcode = Attribute("The action code.")
    name = Attribute("The mnemonic of the action code.")
    descriptor = Attribute("The OpcodeDescriptor, or None for opaque actions.")
    offset = Attribute("The byte offset this action was decoded from, in "
                       "the decoded data. Advisory once the block is edited.")
    jumplike = Attribute("Whether the operand is a branch displacement.")

    def stack_effect():
        """
        Return a (pop, push) tuple. This is advisory only.
        """

    def encode_operands(bits):
        """
        Write the operand bytes counted by the record's length field.
        """

    def decode_operands(bits, descriptor, length):
        """
        Classmethod. Read the operand bytes and return an instance.
        """

    def to_mnemonic_text():
        """
        Return a human-readable representation.
        """

    def serialize():
        """
        Return the complete encoding of this action as a bytestring.
        """

class IContainer(IInstruction):
    """
    An action that owns nested blocks of actions.
    """
    block_names = Attribute("Attribute names of the nested sequences.")

    def block_sizes():
        """
        Return the nested block sizes read from the header.
        """

    def encoder_pass(encoder):
        """
        Encode the nested blocks with encoder, ahead of the header.
        """

class IInstructionSequence(Interface):
    """
    An ordered block of actions.
    """

    def __iter__():
        """
        Iterate over the actions in order.
        """

    def __len__():
        """
        The number of actions.
        """

    def insert(index, instruction):
        """
        Insert instruction, keeping branch targets on the same actions.
        """
