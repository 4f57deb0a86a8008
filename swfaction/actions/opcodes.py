"""
The opcode table: a registry mapping action codes to descriptors.

The table is filled once, at import time and by :func:`register_opcode`
calls made before the first lookup. The first lookup freezes it, after
which it is only ever read and can be shared between threads.
"""

import threading

from collections import namedtuple

from swfaction.actions import instructions as I
from swfaction.actions.constants import SHORT_ACTION_THRESHOLD, UI8_MAX
from swfaction.actions.errors import UnknownOpcode, OpcodeTableFrozen

class OpcodeDescriptor(namedtuple("OpcodeDescriptor", "code mnemonic pop_count push_count "
                                                      "has_inline_operands base options")):
    """
    An immutable entry of the opcode table.

    pop_count and push_count describe the usual stack effect of the
    action. They are advisory: nothing checks them at run time.
    """
    __slots__ = ()

    def __repr__(self):
        return "<OpcodeDescriptor %s (0x%02X)>" % (self.mnemonic, self.code)

class OpcodeTable(object):
    def __init__(self):
        self._by_code = {}
        self._by_name = {}
        self._classes = {}
        self._frozen = False
        self._lock = threading.Lock()

    @property
    def frozen(self):
        return self._frozen

    def register(self, descriptor):
        """
        Add descriptor to the table.
        """
        if self._frozen:
            raise OpcodeTableFrozen("cannot register %r, the opcode table is "
                                    "frozen" % (descriptor.mnemonic,),
                                    opcode=descriptor.code)
        if not 0 <= descriptor.code <= UI8_MAX:
            raise ValueError("action code %r does not fit in a byte" % (descriptor.code,))
        # Mnemonics are looked up without trailing underscores.
        descriptor = descriptor._replace(mnemonic=descriptor.mnemonic.rstrip("_"),
                                        has_inline_operands=descriptor.code >= SHORT_ACTION_THRESHOLD)
        if descriptor.code in self._by_code:
            raise ValueError("action code 0x%02X is already registered as %r" % \
                             (descriptor.code, self._by_code[descriptor.code].mnemonic))
        if descriptor.mnemonic in self._by_name:
            raise ValueError("mnemonic %r is already registered" % (descriptor.mnemonic,))
        if not descriptor.has_inline_operands and descriptor.base is not I.BaseInstruction:
            raise ValueError("action code 0x%02X is below 0x%02X and cannot carry "
                             "operands" % (descriptor.code, SHORT_ACTION_THRESHOLD))
        self._by_code[descriptor.code] = descriptor
        self._by_name[descriptor.mnemonic] = descriptor
        return descriptor

    def freeze(self):
        """
        Freeze the table and build the instruction classes.
        """
        with self._lock:
            if self._frozen:
                return
            for descriptor in self._by_code.values():
                kw = dict(descriptor.options)
                kw.update(descriptor=descriptor,
                          opcode=descriptor.code,
                          name=descriptor.mnemonic)
                self._classes[descriptor.mnemonic] = \
                    type(descriptor.mnemonic, (descriptor.base,), kw)
            self._frozen = True

    def lookup(self, code):
        if not self._frozen:
            self.freeze()
        try:
            return self._by_code[code]
        except KeyError:
            raise UnknownOpcode("unknown action code", opcode=code)

    def lookup_by_mnemonic(self, name):
        if not self._frozen:
            self.freeze()
        name = name.rstrip("_")
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownOpcode("unknown mnemonic %r" % (name,))

    def instruction_class(self, descriptor):
        """
        Return the instruction class generated for descriptor.
        """
        if not self._frozen:
            self.freeze()
        return self._classes[descriptor.mnemonic]

    def get_instruction(self, name):
        return self.instruction_class(self.lookup_by_mnemonic(name))

    def __iter__(self):
        return iter(sorted(self._by_code.values()))

    def __len__(self):
        return len(self._by_code)

    def __contains__(self, key):
        if isinstance(key, str):
            return key.rstrip("_") in self._by_name
        return key in self._by_code

## Instruction Table

def OP(opcode, pop=0, push=0, base=I.BaseInstruction, **kw):
    return opcode, pop, push, base, kw

OpTable = dict(
    next_frame          = OP(0x04),
    previous_frame      = OP(0x05),
    play                = OP(0x06),
    stop                = OP(0x07),
    toggle_quality      = OP(0x08),
    stop_sounds         = OP(0x09),

    add                 = OP(0x0A, 2, 1),
    subtract            = OP(0x0B, 2, 1),
    multiply            = OP(0x0C, 2, 1),
    divide              = OP(0x0D, 2, 1),
    equals              = OP(0x0E, 2, 1),
    less                = OP(0x0F, 2, 1),
    and_                = OP(0x10, 2, 1),
    or_                 = OP(0x11, 2, 1),
    not_                = OP(0x12, 1, 1),

    string_equals       = OP(0x13, 2, 1),
    string_length       = OP(0x14, 1, 1),
    string_extract      = OP(0x15, 3, 1),
    pop                 = OP(0x17, 1, 0),
    to_integer          = OP(0x18, 1, 1),
    get_variable        = OP(0x1C, 1, 1),
    set_variable        = OP(0x1D, 2, 0),
    set_target2         = OP(0x20, 1, 0),
    string_add          = OP(0x21, 2, 1),
    get_property        = OP(0x22, 2, 1),
    set_property        = OP(0x23, 3, 0),
    clone_sprite        = OP(0x24, 3, 0),
    remove_sprite       = OP(0x25, 1, 0),
    trace               = OP(0x26, 1, 0),
    start_drag          = OP(0x27, 3, 0),
    end_drag            = OP(0x28),
    string_less         = OP(0x29, 2, 1),
    throw               = OP(0x2A, 1, 0),
    cast_op             = OP(0x2B, 2, 1),
    implements_op       = OP(0x2C, 2, 0),
    fs_command2         = OP(0x2D, 1, 1),
    random_number       = OP(0x30, 1, 1),
    mb_string_length    = OP(0x31, 1, 1),
    char_to_ascii       = OP(0x32, 1, 1),
    ascii_to_char       = OP(0x33, 1, 1),
    get_time            = OP(0x34, 0, 1),
    mb_string_extract   = OP(0x35, 3, 1),
    mb_char_to_ascii    = OP(0x36, 1, 1),
    mb_ascii_to_char    = OP(0x37, 1, 1),

    delete              = OP(0x3A, 2, 1),
    delete2             = OP(0x3B, 1, 1),
    define_local        = OP(0x3C, 2, 0),
    call_function       = OP(0x3D, 2, 1),
    return_             = OP(0x3E, 1, 0),
    modulo              = OP(0x3F, 2, 1),
    new_object          = OP(0x40, 2, 1),
    define_local2       = OP(0x41, 1, 0),
    init_array          = OP(0x42, 1, 1),
    init_object         = OP(0x43, 1, 1),
    type_of             = OP(0x44, 1, 1),
    target_path         = OP(0x45, 1, 1),
    enumerate           = OP(0x46, 1, 1),
    add2                = OP(0x47, 2, 1),
    less2               = OP(0x48, 2, 1),
    equals2             = OP(0x49, 2, 1),
    to_number           = OP(0x4A, 1, 1),
    to_string           = OP(0x4B, 1, 1),
    push_duplicate      = OP(0x4C, 1, 2),
    stack_swap          = OP(0x4D, 2, 2),
    get_member          = OP(0x4E, 2, 1),
    set_member          = OP(0x4F, 3, 0),
    increment           = OP(0x50, 1, 1),
    decrement           = OP(0x51, 1, 1),
    call_method         = OP(0x52, 3, 1),
    new_method          = OP(0x53, 3, 1),
    instance_of         = OP(0x54, 2, 1),
    enumerate2          = OP(0x55, 1, 1),

    bit_and             = OP(0x60, 2, 1),
    bit_or              = OP(0x61, 2, 1),
    bit_xor             = OP(0x62, 2, 1),
    bit_lshift          = OP(0x63, 2, 1),
    bit_rshift          = OP(0x64, 2, 1),
    bit_urshift         = OP(0x65, 2, 1),
    strict_equals       = OP(0x66, 2, 1),
    greater             = OP(0x67, 2, 1),
    string_greater      = OP(0x68, 2, 1),
    extends             = OP(0x69, 2, 0),

    goto_frame          = OP(0x81, base=I.GotoFrame),
    get_url             = OP(0x83, base=I.GetURL),
    store_register      = OP(0x87, 1, 1, base=I.StoreRegister),
    constant_pool       = OP(0x88, base=I.ConstantPool),
    strict_mode         = OP(0x89, base=I.StrictMode),
    wait_for_frame      = OP(0x8A, base=I.WaitForFrame),
    set_target          = OP(0x8B, base=I.StringOperand),
    goto_label          = OP(0x8C, base=I.StringOperand),
    wait_for_frame2     = OP(0x8D, 1, 0, base=I.WaitForFrame2),
    define_function2    = OP(0x8E, base=I.DefineFunction2),
    try_                = OP(0x8F, base=I.Try),
    with_               = OP(0x94, 1, 0, base=I.With),
    push                = OP(0x96, base=I.Push),
    jump                = OP(0x99, base=I.Branch),
    get_url2            = OP(0x9A, 2, 0, base=I.GetURL2),
    define_function     = OP(0x9B, base=I.DefineFunction),
    if_                 = OP(0x9D, 1, 0, base=I.Branch),
    call                = OP(0x9E, 1, 0),
    goto_frame2         = OP(0x9F, 1, 0, base=I.GotoFrame2),
)

## Public API.

def register_opcode(code, mnemonic, pop=0, push=0, base=I.BaseInstruction,
                    table=None, **kw):
    """
    Add an action code to the table, for vendor and custom actions.
    This must happen before the table is first used.
    """
    if table is None:
        table = opcodes
    descriptor = OpcodeDescriptor(code, mnemonic.rstrip("_"), pop, push,
                                  code >= SHORT_ACTION_THRESHOLD, base, kw)
    return table.register(descriptor)

def standard_table():
    """
    Return a new, unfrozen table holding every SWF 10 action.
    """
    table = OpcodeTable()
    for name, (opcode, pop, push, base, kw) in OpTable.items():
        register_opcode(opcode, name, pop, push, base, table=table, **kw)
    return table

opcodes = standard_table()

def lookup(code):
    return opcodes.lookup(code)

def lookup_by_mnemonic(name):
    return opcodes.lookup_by_mnemonic(name)

def get_instruction(name):
    """
    Return the instruction class for the mnemonic name.

    >>> get_instruction("play")()
    <play (0x06)>
    """
    return opcodes.get_instruction(name)

__all__ = ["OpcodeDescriptor", "OpcodeTable", "opcodes", "standard_table", "register_opcode",
           "lookup", "lookup_by_mnemonic", "get_instruction"]
