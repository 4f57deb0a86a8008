"""
The AVM1 action records, otherwise known as "instructions".

Each action code in the opcode table names one of the classes below
as its base. The table creates a subclass per action code carrying its
``descriptor``, ``opcode`` and ``name``; see
:func:`swfaction.actions.opcodes.get_instruction`.

.. seealso:

   `SWF Specification v10 <http://www.adobe.com/devnet/swf/>`_
      Adobe's specifications for the SWF file format.
"""

import os
import struct

from collections import namedtuple

from swfaction.bitstream import BitStream
from swfaction.util import hex_bytes
from swfaction.actions import types_ as types
from swfaction.actions.constants import (SHORT_ACTION_THRESHOLD, UI16_MAX,
                                         SendVarsMethod)
from swfaction.actions.interfaces import IInstruction, IContainer
from swfaction.actions.sequence import InstructionSequence

from zope.interface import implementer

@implementer(IInstruction)
class BaseInstruction(object):
    """
    An action with no operands, and the base class of all actions.
    """

    descriptor = None
    opcode = None
    name = None
    offset = None
    jumplike = False

    # Operand bytes declared by the length field but not consumed
    # when the action was decoded.
    trailing = b""

    def __repr__(self):
        return "<%s (0x%02X)%s>" % (self.name, self.opcode, self.additional_repr())

    def additional_repr(self):
        text = self.operand_text()
        return " " + text if text else ""

    def __eq__(self, other):
        if type(self) is not type(other):
            return False
        return self.opcode == other.opcode and \
               self.operands() == other.operands() and \
               self.trailing == other.trailing

    def __ne__(self, other):
        return not self == other

    __hash__ = None

    def operands(self):
        """
        The operand values of this action, used for comparisons.
        """
        return ()

    def stack_effect(self):
        return self.descriptor.pop_count, self.descriptor.push_count

    @property
    def has_length(self):
        return self.opcode >= SHORT_ACTION_THRESHOLD

    def encode_operands(self, bits):
        """
        Overridden in subclasses.

        Write the data counted by the record length.
        """

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        """
        Overridden in subclasses.

        Read the operands from bits, a BitStream holding the length
        bytes declared by the record header.
        """
        return cls()

    def operand_text(self):
        return ""

    def to_mnemonic_text(self):
        text = self.operand_text()
        if text:
            return "%s %s" % (self.name, text)
        return self.name

    def header_data(self):
        bits = BitStream()
        self.encode_operands(bits)
        return bits.serialize() + self.trailing

    def outer_data(self):
        """
        Data that follows the record but is not counted by its length.
        """
        return b""

    def serialize(self):
        if not self.has_length:
            return struct.pack("<B", self.opcode)
        data = self.header_data()
        if len(data) > UI16_MAX:
            raise OverflowError("%s has %d bytes of operands, more than a"
                                " UI16 length can hold" % (self.name, len(data)))
        return struct.pack("<BH", self.opcode, len(data)) + data + self.outer_data()

    def __len__(self):
        if not self.has_length:
            return 1
        return len(self.serialize())

class OpaqueInstruction(BaseInstruction):
    """
    An action code that is not in the opcode table. The operand bytes
    are kept as they are.
    """

    def __init__(self, opcode, payload=b""):
        if opcode < SHORT_ACTION_THRESHOLD and payload:
            raise ValueError("action 0x%02X cannot carry operands" % (opcode,))
        self.opcode = opcode
        self.name = "unknown_0x%02X" % (opcode,)
        self.payload = bytes(payload)

    def operands(self):
        return (self.payload,)

    def stack_effect(self):
        return 0, 0

    def encode_operands(self, bits):
        bits.write_bytes(self.payload)

    def operand_text(self):
        return hex_bytes(self.payload)

## Literal operands

class GotoFrame(BaseInstruction):
    def __init__(self, frame):
        self.frame = frame

    def operands(self):
        return (self.frame,)

    def encode_operands(self, bits):
        bits.write_int_value(self.frame, 16, endianness="<")

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        return cls(bits.read_int_value(16, endianness="<"))

    def operand_text(self):
        return "%d" % (self.frame,)

class GetURL(BaseInstruction):
    def __init__(self, url="", target=""):
        self.url = url
        self.target = target

    def operands(self):
        return self.url, self.target

    def encode_operands(self, bits):
        bits.write_cstring(self.url)
        bits.write_cstring(self.target)

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        url = bits.read_cstring()
        target = bits.read_cstring()
        return cls(url, target)

    def operand_text(self):
        return "%r, %r" % (self.url, self.target)

class StoreRegister(BaseInstruction):
    def __init__(self, register):
        self.register = register

    def operands(self):
        return (self.register,)

    def encode_operands(self, bits):
        bits.write_int_value(self.register, 8)

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        return cls(bits.read_int_value(8))

    def operand_text(self):
        return "r:%d" % (self.register,)

class ConstantPool(BaseInstruction):
    """
    Declares the strings that ActionPush refers to with CONSTANT8
    and CONSTANT16 values.
    """

    def __init__(self, *constants):
        self.pool = list(constants)

    def add_constant(self, string):
        """
        Return the index of string, adding it to the pool if needed.
        """
        if string not in self.pool:
            self.pool.append(string)
            return len(self.pool) - 1
        return self.pool.index(string)

    def operands(self):
        return tuple(self.pool)

    def encode_operands(self, bits):
        bits.write_int_value(len(self.pool), 16, endianness="<")
        for string in self.pool:
            bits.write_cstring(string)

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        count = bits.read_int_value(16, endianness="<")
        return cls(*[bits.read_cstring() for _ in range(count)])

    def operand_text(self):
        return ", ".join(repr(s) for s in self.pool)

class StrictMode(BaseInstruction):
    def __init__(self, mode=1):
        self.mode = mode

    def operands(self):
        return (self.mode,)

    def encode_operands(self, bits):
        bits.write_int_value(self.mode, 8)

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        return cls(bits.read_int_value(8))

    def operand_text(self):
        return "%d" % (self.mode,)

class WaitForFrame(BaseInstruction):
    def __init__(self, frame, skip_count=0):
        self.frame = frame
        self.skip_count = skip_count

    def operands(self):
        return self.frame, self.skip_count

    def encode_operands(self, bits):
        bits.write_int_value(self.frame, 16, endianness="<")
        bits.write_int_value(self.skip_count, 8)

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        frame = bits.read_int_value(16, endianness="<")
        return cls(frame, bits.read_int_value(8))

    def operand_text(self):
        return "%d, %d" % (self.frame, self.skip_count)

class WaitForFrame2(BaseInstruction):
    def __init__(self, skip_count):
        self.skip_count = skip_count

    def operands(self):
        return (self.skip_count,)

    def encode_operands(self, bits):
        bits.write_int_value(self.skip_count, 8)

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        return cls(bits.read_int_value(8))

    def operand_text(self):
        return "%d" % (self.skip_count,)

class StringOperand(BaseInstruction):
    """
    An action whose only operand is a string, like ActionSetTarget
    and ActionGoToLabel.
    """

    def __init__(self, string):
        self.string = string

    def operands(self):
        return (self.string,)

    def encode_operands(self, bits):
        bits.write_cstring(self.string)

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        return cls(bits.read_cstring())

    def operand_text(self):
        return repr(self.string)

class GetURL2(BaseInstruction):
    def __init__(self, method=0, load_target=False, load_variables=False, reserved=0):
        if isinstance(method, str):
            method = getattr(SendVarsMethod, method.upper() or "none")
        self.method = method
        self.load_target = load_target
        self.load_variables = load_variables
        self.reserved = reserved

    def operands(self):
        return self.method, self.load_target, self.load_variables, self.reserved

    def encode_operands(self, bits):
        # Adobe's SWF 10 document has these reversed:
        # method goes at the low end
        # and the flags at the high end
        bits.write_bit(self.load_variables)
        bits.write_bit(self.load_target)
        bits.write_int_value(self.reserved, 4)
        bits.write_int_value(self.method, 2)

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        load_variables = bits.read_bit()
        load_target = bits.read_bit()
        reserved = bits.read_int_value(4)
        method = bits.read_int_value(2)
        return cls(method, load_target, load_variables, reserved)

    def operand_text(self):
        parts = [SendVarsMethod.names.get(self.method, str(self.method)) or "none"]
        if self.load_target:
            parts.append("load_target")
        if self.load_variables:
            parts.append("load_variables")
        return ", ".join(parts)

class GotoFrame2(BaseInstruction):
    def __init__(self, play=False, scene_bias=None, reserved=0):
        self.play = play
        self.scene_bias = scene_bias
        self.reserved = reserved

    def operands(self):
        return self.play, self.scene_bias, self.reserved

    def encode_operands(self, bits):
        bits.write_int_value(self.reserved, 6)
        bits.write_bit(self.scene_bias is not None)
        bits.write_bit(self.play)
        if self.scene_bias is not None:
            bits.write_int_value(self.scene_bias, 16, endianness="<")

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        reserved = bits.read_int_value(6)
        has_scene_bias = bits.read_bit()
        play = bits.read_bit()
        scene_bias = None
        if has_scene_bias:
            scene_bias = bits.read_int_value(16, endianness="<")
        return cls(play, scene_bias, reserved)

    def operand_text(self):
        text = "play" if self.play else "stop"
        if self.scene_bias is not None:
            text += ", scene_bias=%d" % (self.scene_bias,)
        return text

class Push(BaseInstruction):
    """
    Push one or more typed values. Plain Python values are converted
    with :func:`types_.pytype_to_avm1`.
    """

    def __init__(self, *args):
        self.values = []
        self.add_elements(args)

    def add_elements(self, iterable):
        for t in iterable:
            self.add_element(t)

    def add_element(self, element):
        self.values.append(types.pytype_to_avm1(element))

    def operands(self):
        return tuple(self.values)

    def stack_effect(self):
        return 0, len(self.values)

    def encode_operands(self, bits):
        for value, type in self.values:
            bits.write_int_value(type.id, 8)
            type.write(bits, value)

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        inst = cls()
        while bits.bits_available > 0:
            type = types.DataType.REVERSE_INDEX.get(bits.read_int_value(8))
            if type is None:
                # Leave the rest to the trailing bytes.
                bits.seek(-8, os.SEEK_CUR)
                break
            inst.values.append(types.PushValue(type.read(bits), type))
        return inst

    def operand_text(self):
        return ", ".join(type.text(value) for value, type in self.values)

## Branches

class Branch(BaseInstruction):
    """
    ActionJump and ActionIf. The operand is a signed 16-bit offset
    from the end of this action; ``target`` is the index of the
    action it lands on in the owning sequence, or the length of the
    sequence for its end.

    ``displacement`` is only meaningful right after decoding or
    encoding.
    """

    jumplike = True

    def __init__(self, target=None):
        self.target = target
        self.displacement = 0

    def operands(self):
        return (self.target,)

    def encode_operands(self, bits):
        bits.write_int_value(self.displacement, 16, signed=True, endianness="<")

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        inst = cls()
        inst.displacement = bits.read_int_value(16, signed=True, endianness="<")
        return inst

    def operand_text(self):
        if self.target is None:
            return "%+d" % (self.displacement,)
        return "-> %d" % (self.target,)

## Containers

def _as_sequence(block):
    if isinstance(block, InstructionSequence):
        return block
    return InstructionSequence(block or ())

@implementer(IContainer)
class Container(BaseInstruction):
    """
    An action that owns blocks of actions. The header ends with the
    size of each block, and the blocks follow the record in order,
    outside of the record's length.
    """

    block_names = ("body",)

    # Encoded blocks, only set while an Encoder is working on us.
    block_data = None

    decoded_sizes = ()

    def blocks(self):
        return [getattr(self, name) for name in self.block_names]

    def named_blocks(self):
        return [(name, getattr(self, name)) for name in self.block_names]

    def block_sizes(self):
        return list(self.decoded_sizes)

    def encoder_pass(self, encoder):
        self.block_data = [encoder.encode_block(block) for block in self.blocks()]

    def _block_data(self):
        if self.block_data is not None:
            return self.block_data
        from swfaction.actions.encoder import Encoder
        encoder = Encoder()
        return [encoder.encode_block(block) for block in self.blocks()]

    def encoded_sizes(self):
        return [len(data) for data in self._block_data()]

    def outer_data(self):
        return b"".join(self._block_data())

    def write_sizes(self, bits, sizes):
        for size in sizes:
            bits.write_int_value(size, 16, endianness="<")

class DefineFunction(Container):
    def __init__(self, name="", params=(), body=None):
        self.function_name = name
        self.params = list(params)
        self.body = _as_sequence(body)

    def operands(self):
        return self.function_name, tuple(self.params), self.body

    def stack_effect(self):
        # Anonymous functions are pushed.
        return 0, 0 if self.function_name else 1

    def encode_operands(self, bits):
        bits.write_cstring(self.function_name)
        bits.write_int_value(len(self.params), 16, endianness="<")
        for param in self.params:
            bits.write_cstring(param)
        self.write_sizes(bits, self.encoded_sizes())

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        name = bits.read_cstring()
        count = bits.read_int_value(16, endianness="<")
        params = [bits.read_cstring() for _ in range(count)]
        inst = cls(name, params)
        inst.decoded_sizes = [bits.read_int_value(16, endianness="<")]
        return inst

    def operand_text(self):
        return "%r (%s)" % (self.function_name, ", ".join(self.params))

RegisterParam = namedtuple("RegisterParam", "register name")

class DefineFunction2(Container):
    """
    ActionDefineFunction2. Parameters are (register, name) pairs; a
    register of 0 keeps the parameter in a variable instead.
    """

    FLAG_NAMES = ("preload_parent", "preload_root",
                  "suppress_super", "preload_super",
                  "suppress_arguments", "preload_arguments",
                  "suppress_this", "preload_this")

    def __init__(self, name="", params=(), register_count=0, body=None,
                 preload_parent=False, preload_root=False,
                 suppress_super=False, preload_super=False,
                 suppress_arguments=False, preload_arguments=False,
                 suppress_this=False, preload_this=False,
                 preload_global=False, reserved=0):
        self.function_name = name
        self.params = [RegisterParam(*p) if isinstance(p, tuple) else RegisterParam(0, p)
                       for p in params]
        self.register_count = register_count
        self.body = _as_sequence(body)

        # Flags
        self.preload_parent     = preload_parent
        self.preload_root       = preload_root
        self.suppress_super     = suppress_super
        self.preload_super      = preload_super
        self.suppress_arguments = suppress_arguments
        self.preload_arguments  = preload_arguments
        self.suppress_this      = suppress_this
        self.preload_this       = preload_this
        self.preload_global     = preload_global
        self.reserved           = reserved

    def flags(self):
        return tuple(getattr(self, name) for name in self.FLAG_NAMES) + \
               (self.preload_global, self.reserved)

    def operands(self):
        return (self.function_name, tuple(self.params), self.register_count,
                self.flags(), self.body)

    def stack_effect(self):
        return 0, 0 if self.function_name else 1

    def encode_operands(self, bits):
        bits.write_cstring(self.function_name)
        bits.write_int_value(len(self.params), 16, endianness="<")
        bits.write_int_value(self.register_count, 8)
        for name in self.FLAG_NAMES:
            bits.write_bit(getattr(self, name))
        bits.write_int_value(self.reserved, 7)
        bits.write_bit(self.preload_global)
        for register, name in self.params:
            bits.write_int_value(register, 8)
            bits.write_cstring(name)
        self.write_sizes(bits, self.encoded_sizes())

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        name = bits.read_cstring()
        count = bits.read_int_value(16, endianness="<")
        register_count = bits.read_int_value(8)
        flags = dict((flag, bits.read_bit()) for flag in cls.FLAG_NAMES)
        flags["reserved"] = bits.read_int_value(7)
        flags["preload_global"] = bits.read_bit()
        params = []
        for i in range(count):
            register = bits.read_int_value(8)
            params.append(RegisterParam(register, bits.read_cstring()))
        inst = cls(name, params, register_count, **flags)
        inst.decoded_sizes = [bits.read_int_value(16, endianness="<")]
        return inst

    def operand_text(self):
        params = ", ".join("r:%d=%s" % p if p.register else p.name for p in self.params)
        text = "%r (%s), registers=%d" % (self.function_name, params, self.register_count)
        flags = [name for name in self.FLAG_NAMES + ("preload_global",) if getattr(self, name)]
        if flags:
            text += ", " + " ".join(flags)
        return text

class With(Container):
    def __init__(self, body=None):
        self.body = _as_sequence(body)

    def operands(self):
        return (self.body,)

    def encode_operands(self, bits):
        self.write_sizes(bits, self.encoded_sizes())

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        inst = cls()
        inst.decoded_sizes = [bits.read_int_value(16, endianness="<")]
        return inst

class Try(Container):
    """
    ActionTry. The caught value goes to a register when catch_target
    is an int, otherwise to the variable it names.
    """

    block_names = ("try_body", "catch_body", "finally_body")

    def __init__(self, catch_target="", try_body=None, catch_body=None,
                 finally_body=None, has_catch=None, has_finally=None, reserved=0):
        self.catch_target = catch_target
        self.try_body = _as_sequence(try_body)
        self.catch_body = _as_sequence(catch_body)
        self.finally_body = _as_sequence(finally_body)
        if has_catch is None:
            has_catch = len(self.catch_body) > 0
        if has_finally is None:
            has_finally = len(self.finally_body) > 0
        self.has_catch = has_catch
        self.has_finally = has_finally
        self.reserved = reserved

    @property
    def catch_in_register(self):
        return isinstance(self.catch_target, int)

    def operands(self):
        return (self.catch_target, self.has_catch, self.has_finally, self.reserved,
                self.try_body, self.catch_body, self.finally_body)

    def encode_operands(self, bits):
        bits.write_int_value(self.reserved, 5)
        bits.write_bit(self.catch_in_register)
        bits.write_bit(self.has_finally)
        bits.write_bit(self.has_catch)
        self.write_sizes(bits, self.encoded_sizes())
        if self.catch_in_register:
            bits.write_int_value(self.catch_target, 8)
        else:
            bits.write_cstring(self.catch_target)

    @classmethod
    def decode_operands(cls, bits, descriptor, length):
        reserved = bits.read_int_value(5)
        in_register = bits.read_bit()
        has_finally = bits.read_bit()
        has_catch = bits.read_bit()
        sizes = [bits.read_int_value(16, endianness="<") for _ in range(3)]
        if in_register:
            catch_target = bits.read_int_value(8)
        else:
            catch_target = bits.read_cstring()
        inst = cls(catch_target, has_catch=has_catch, has_finally=has_finally,
                   reserved=reserved)
        inst.decoded_sizes = sizes
        return inst

    def operand_text(self):
        if self.catch_in_register:
            text = "r:%d" % (self.catch_target,)
        else:
            text = repr(self.catch_target)
        if self.has_catch:
            text += ", catch"
        if self.has_finally:
            text += ", finally"
        return text
