
import pytest

import swfaction
from swfaction import actiondump

# play, jump -> 0
BLOCK = b"\x06\x99\x02\x00\xfa\xff\x00"

def test_round_trip():
    sequence = swfaction.decode(BLOCK)
    assert swfaction.encode(sequence) == BLOCK
    assert list(swfaction.disassemble(sequence)) == ["0\tplay", "1\tjump -> 0"]

def test_build():
    sequence = swfaction.InstructionSequence()
    sequence.emit("push", "hello")
    sequence.emit("trace")
    assert swfaction.encode(sequence) == b"\x96\x07\x00\x00hello\x00\x26\x00"

def test_errors():
    pytest.raises(swfaction.TruncatedStream, swfaction.decode, b"\x06")
    pytest.raises(swfaction.ActionError, swfaction.decode, b"\x99\x02\x00\x01\x00\x00\x00")
    assert issubclass(swfaction.UnknownOpcode, KeyError)
    assert issubclass(swfaction.EncodeOverflow, OverflowError)

def test_actiondump(tmpdir, capsys):
    path = tmpdir.join("block.bin")
    path.write_binary(BLOCK)
    actiondump.main([str(path)])

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "actions in block.bin at offset 0, 7.0 bytes"
    assert "0\tplay" in lines
    assert "1\tjump -> 0" in lines
    assert lines[-1] == "// 2 actions, 0 unknown action codes"

def test_actiondump_offset(tmpdir, capsys):
    path = tmpdir.join("block.bin")
    path.write_binary(b"FWS" + BLOCK)
    actiondump.main(["-x", str(path), "3"])

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "actions in block.bin at offset 3, 7.0 bytes"
    assert lines[1].startswith("00000003  06 99 02 00 FA FF 00")
    assert "1\tjump -> 0" in lines

def test_actiondump_errors(tmpdir, capsys):
    with pytest.raises(SystemExit) as excinfo:
        actiondump.main([])
    assert excinfo.value.code == 2

    path = tmpdir.join("truncated.bin")
    path.write_binary(b"\x96\x04\x00\x00")
    with pytest.raises(SystemExit) as excinfo:
        actiondump.main([str(path)])
    assert excinfo.value.code == 2
    assert "error:" in capsys.readouterr().err

    path = tmpdir.join("unknown.bin")
    path.write_binary(b"\x02\x00")
    with pytest.raises(SystemExit):
        actiondump.main(["-s", str(path)])
    actiondump.main([str(path)])
    assert capsys.readouterr().out.splitlines()[-1] == "// 1 actions, 1 unknown action codes"
