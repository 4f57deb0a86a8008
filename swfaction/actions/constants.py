
# ======================================
# Action record framing
# ======================================

# Action codes below this value are a single byte. Codes at or above
# it are followed by a UI16 length and that many bytes of operands.
SHORT_ACTION_THRESHOLD = 0x80

# ActionEndFlag, the byte that ends a top-level action block.
END_ACTION = 0x00

# ======================================
# Field limits
# ======================================

UI8_MAX  = 2**8 - 1
UI16_MAX = 2**16 - 1

SI16_MIN = -2**15
SI16_MAX = 2**15 - 1

SI32_MIN = -2**31
SI32_MAX = 2**31 - 1

# The size of the opcode byte and the UI16 length field.
LONG_HEADER_SIZE = 3

# ======================================
# GetURL2 methods
# ======================================

class SendVarsMethod(object):
    # Don't send variables
    none = 0
    GET  = 1
    POST = 2

    names = {0: "", 1: "GET", 2: "POST"}
