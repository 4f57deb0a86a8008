
import pytest

from swfaction.actions.opcodes import get_instruction
from swfaction.actions.sequence import InstructionSequence

def make_sequence():
    """
    play, jump -> 3, stop, play
    """
    sequence = InstructionSequence()
    sequence.emit("play")
    sequence.emit("jump", 3)
    sequence.emit("stop")
    sequence.emit("play")
    return sequence

def test_list_protocol():
    sequence = make_sequence()
    assert len(sequence) == 4
    assert [inst.name for inst in sequence] == ["play", "jump", "stop", "play"]
    assert sequence[-1].name == "play"
    assert [inst.name for inst in sequence[1:3]] == ["jump", "stop"]
    assert sequence == make_sequence()
    assert sequence != InstructionSequence()
    assert sequence != "play"

def test_emit():
    sequence = InstructionSequence()
    inst = sequence.emit("goto_frame", 4)
    assert sequence[0] is inst
    assert inst.frame == 4

    sequence.extend([get_instruction("play")(), get_instruction("stop")()])
    assert len(sequence) == 3

def test_index_by_identity():
    sequence = make_sequence()
    assert sequence[0] == sequence[3]
    assert sequence.index(sequence[3]) == 3
    pytest.raises(ValueError, sequence.index, get_instruction("play")())

def test_insert():
    sequence = make_sequence()
    jump = sequence[1]
    target = sequence[3]

    sequence.insert(2, get_instruction("next_frame")())
    assert jump.target == 4
    assert sequence[jump.target] is target

    # Before the branch itself.
    sequence.insert(0, get_instruction("next_frame")())
    assert sequence[jump.target] is target

    # Negative indices count from the end.
    sequence.insert(-1, get_instruction("next_frame")())
    assert sequence[jump.target] is target
    assert sequence[-2].name == "next_frame"

def test_insert_after_target():
    sequence = make_sequence()
    sequence.append(get_instruction("stop")())
    sequence.insert(4, get_instruction("play")())
    assert sequence[1].target == 3

def test_insert_at_end():
    sequence = InstructionSequence()
    jump = sequence.emit("jump", 1)
    sequence.insert(1, get_instruction("play")())
    assert jump.target == 2 == len(sequence)

def test_pop():
    sequence = make_sequence()
    jump = sequence[1]

    inst = sequence.pop(2)
    assert inst.name == "stop"
    assert jump.target == 2
    assert sequence[2].name == "play"

    # Removing the target lands on what followed it.
    sequence.pop()
    assert jump.target == 2 == len(sequence)

def test_remove_and_delete():
    sequence = make_sequence()
    jump = sequence[1]
    sequence.remove(sequence[0])
    assert jump.target == 2
    assert sequence[0] is jump

    del sequence[1]
    assert jump.target == 1
    assert [inst.name for inst in sequence] == ["jump", "play"]

def test_delete_slice():
    sequence = make_sequence()
    sequence.append(get_instruction("next_frame")())
    jump = sequence[1]
    del sequence[2:4]
    assert [inst.name for inst in sequence] == ["play", "jump", "next_frame"]
    assert jump.target == 2

def test_replace():
    sequence = make_sequence()
    sequence[3] = get_instruction("stop")()
    assert sequence[1].target == 3
    assert sequence[3].name == "stop"

def test_stack_depth():
    sequence = InstructionSequence()
    sequence.emit("push", 1, 2)
    sequence.emit("add")
    sequence.emit("trace")
    assert sequence.stack_depth() == (0, 2)
    assert InstructionSequence().stack_depth() == (0, 0)

def test_slice_assignment():
    sequence = make_sequence()
    sequence[3] = get_instruction("next_frame")()
    jump = sequence[1]
    target = sequence[3]

    sequence[0:1] = []
    assert len(sequence) == 3
    assert jump.target == 2
    assert sequence[jump.target] is target

    sequence[1:1] = [get_instruction("play")(), get_instruction("play")()]
    assert len(sequence) == 5
    assert sequence[jump.target] is target

    # Replacing the target lands on the action after the new ones.
    sequence[4:5] = [get_instruction("stop")()]
    assert jump.target == 5 == len(sequence)

    with pytest.raises(TypeError):
        sequence[::2] = []
