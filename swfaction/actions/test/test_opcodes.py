
import pytest

from swfaction.actions import instructions as I
from swfaction.actions.errors import UnknownOpcode, OpcodeTableFrozen
from swfaction.actions.opcodes import (OpcodeDescriptor, opcodes, standard_table, register_opcode,
                                       lookup, lookup_by_mnemonic, get_instruction)

def test_bijection():
    for descriptor in opcodes:
        assert lookup(descriptor.code) is descriptor
        assert lookup_by_mnemonic(descriptor.mnemonic).code == descriptor.code
        assert descriptor.has_inline_operands == (descriptor.code >= 0x80)

def test_code_order():
    codes = [descriptor.code for descriptor in opcodes]
    assert codes == sorted(codes)
    assert len(codes) == len(set(codes)) == len(opcodes)

def test_known_codes():
    assert lookup(0x06).mnemonic == "play"
    assert lookup(0x96).mnemonic == "push"
    assert lookup(0x9E).mnemonic == "call"
    assert lookup(0x9E).has_inline_operands

    assert 0x04 in opcodes
    assert 0x69 in opcodes
    assert 0x9F in opcodes
    assert "if" in opcodes
    assert "if_" in opcodes
    assert "bogus" not in opcodes

def test_unknown():
    with pytest.raises(UnknownOpcode) as excinfo:
        lookup(0x01)
    assert excinfo.value.opcode == 0x01
    pytest.raises(KeyError, lookup, 0xFF)
    pytest.raises(UnknownOpcode, lookup_by_mnemonic, "bogus")

def test_trailing_underscores():
    assert lookup_by_mnemonic("if_") is lookup_by_mnemonic("if")
    assert lookup_by_mnemonic("return_").code == 0x3E
    assert get_instruction("try_") is get_instruction("try")

def test_stack_effects():
    assert lookup_by_mnemonic("add").pop_count == 2
    assert lookup_by_mnemonic("add").push_count == 1
    assert get_instruction("push_duplicate")().stack_effect() == (1, 2)
    assert get_instruction("play")().stack_effect() == (0, 0)

def test_generated_classes():
    play = get_instruction("play")
    assert issubclass(play, I.BaseInstruction)
    assert play.opcode == 0x06
    assert play.name == "play"
    assert play.descriptor is lookup(0x06)

    assert issubclass(get_instruction("jump"), I.Branch)
    assert issubclass(get_instruction("define_function2"), I.DefineFunction2)

def test_register_custom():
    table = standard_table()
    assert not table.frozen
    register_opcode(0x70, "vendor_op", 1, 1, table=table)

    descriptor = table.lookup(0x70)
    assert table.frozen
    assert descriptor.mnemonic == "vendor_op"
    assert table.get_instruction("vendor_op")().serialize() == b"\x70"

    # The shared table is untouched.
    assert 0x70 not in opcodes

def test_register_after_freeze():
    table = standard_table()
    table.lookup(0x06)
    with pytest.raises(OpcodeTableFrozen):
        register_opcode(0x70, "vendor_op", table=table)

def test_register_errors():
    table = standard_table()
    pytest.raises(ValueError, register_opcode, 0x06, "other", table=table)
    pytest.raises(ValueError, register_opcode, 0x71, "play", table=table)
    # Short codes cannot carry operands.
    pytest.raises(ValueError, register_opcode, 0x72, "short_goto",
                  base=I.GotoFrame, table=table)
    assert len(table) == len(opcodes)

def test_register_normalizes():
    table = standard_table()
    pytest.raises(ValueError, register_opcode, 0x100, "too_big", table=table)
    pytest.raises(ValueError, register_opcode, -1, "negative", table=table)

    descriptor = OpcodeDescriptor(0x70, "vendor_", 0, 0, False, I.BaseInstruction, {})
    table.register(descriptor)
    assert table.lookup(0x70).mnemonic == "vendor"
    assert table.lookup_by_mnemonic(table.lookup(0x70).mnemonic).code == 0x70

    table = standard_table()
    table.register(OpcodeDescriptor(0xA0, "vendor_long", 0, 0, False, I.BaseInstruction, {}))
    assert table.lookup(0xA0).has_inline_operands
