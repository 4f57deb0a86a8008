"""
sa-actiondump [-v] [-s] [-x] filename [offset]

disassemble the raw AVM1 action block stored in filename, starting
at the given byte offset (0 by default).

  -v  log debugging output
  -s  fail on unknown action codes
  -x  print a hex dump of the block first
"""

import logging
import os.path
import sys

from swfaction.actions.decoder import Decoder
from swfaction.actions.disassembler import disassemble
from swfaction.actions.errors import ActionError
from swfaction.util import hexdump

def sizeof_fmt(num):
    for x in [' bytes','KiB','MiB','GiB','TiB']:
        if num < 1024.0:
            return "%3.1f%s" % (num, x)
        num /= 1024.0

def error(message):
    if message:
        print("error:", message, file=sys.stderr)
    print(__doc__, file=sys.stderr)
    sys.exit(2)

def header(filename, offset, size):
    base = os.path.basename(filename)
    print("actions in %s at offset %d, %s" % (base, offset, sizeof_fmt(size)))

def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    args = list(argv)

    level, strict, dump_hex = logging.WARNING, False, False
    while args and args[0].startswith("-"):
        flag = args.pop(0)
        if flag == "-v":
            level = logging.DEBUG
        elif flag == "-s":
            strict = True
        elif flag == "-x":
            dump_hex = True
        else:
            error("unknown option %s" % (flag,))

    if not 1 <= len(args) <= 2:
        error("expected a filename and an optional offset")

    filename, offset = args[0], 0
    if len(args) == 2:
        try:
            offset = int(args[1], 0)
        except ValueError:
            error("bad offset %r" % (args[1],))

    logging.basicConfig(level=level, format="%(levelname)s:%(name)s: %(message)s")

    try:
        with open(filename, "rb") as f:
            f.seek(offset)
            data = f.read()
    except (IOError, OSError) as e:
        error(str(e))

    decoder = Decoder(strict=strict)
    try:
        sequence = decoder.decode(data)
    except ActionError as e:
        error(str(e))

    header(filename, offset, len(data))
    if dump_hex:
        for line in hexdump(data, offset):
            print(line)
        print()

    for line in disassemble(sequence):
        print(line)

    print()
    print("// %d actions, %d unknown action codes" % (len(sequence), len(decoder.diagnostics)))

if __name__ == "__main__":
    main()
