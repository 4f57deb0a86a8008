from swfaction import InstructionSequence, encode, decode, disassemble
from swfaction.actions import types_ as types

# i = 10; while (i > 0) { trace(i); i--; }
code = InstructionSequence()
pool = code.emit("constant_pool")
i = pool.add_constant("i")

code.emit("push", types.constant(i), 10)
code.emit("set_variable")

loop = len(code)
code.emit("push", types.constant(i))
code.emit("get_variable")
code.emit("push", 0)
code.emit("greater")
code.emit("not")
done = code.emit("if")

code.emit("push", types.constant(i))
code.emit("get_variable")
code.emit("trace")

code.emit("push", types.constant(i), types.constant(i))
code.emit("get_variable")
code.emit("decrement")
code.emit("set_variable")
code.emit("jump", loop)

done.target = len(code)

with open("countdown.bin", "wb") as f:
    f.write(encode(code))

with open("countdown.bin", "rb") as f:
    for line in disassemble(decode(f.read())):
        print(line)
