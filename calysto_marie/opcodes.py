"""
The MARIE instruction set: mnemonic to opcode-constant table, and a
one-word disassembler that goes the other way.
"""

from .formats import addr_hex

# Opcode constants already shifted into bits 12-15:
instruction_info = {
    'JNS':      0x0 << 12,
    'LOAD':     0x1 << 12,
    'STORE':    0x2 << 12,
    'ADD':      0x3 << 12,
    'SUBT':     0x4 << 12,
    'INPUT':    0x5 << 12,
    'OUTPUT':   0x6 << 12,
    'HALT':     0x7 << 12,
    'SKIPCOND': 0x8 << 12,
    'JUMP':     0x9 << 12,
    'CLEAR':    0xA << 12,
    'ADDI':     0xB << 12,
    'JUMPI':    0xC << 12,
    'LOADI':    0xD << 12,
    'STOREI':   0xE << 12,
}

mnemonic = dict((code >> 12, name) for name, code in instruction_info.items())

# Data directives: the word is the literal itself.
directives = ('DEC', 'HEX')

# Everything that must be followed by an operand:
takes_argument = frozenset(['LOAD', 'STORE', 'ADD', 'SUBT', 'SKIPCOND',
                            'JUMP', 'ADDI', 'JUMPI', 'LOADI', 'STOREI',
                            'JNS', 'DEC', 'HEX'])

# Legal SKIPCOND operands: 000 (AC < 0), 400 (AC == 0), 800 (AC > 0)
skip_conditions = (0x000, 0x400, 0x800)

def is_keyword(word):
    word = word.upper()
    return word in instruction_info or word in directives

def get_opcode(name):
    """
    Return the opcode constant for a mnemonic, or None.
    """
    return instruction_info.get(name.upper())

def decode(word):
    return (word >> 12) & 0xF, word & 0xFFF

def disassemble(word, symbols=None):
    """
    Render a machine word as assembly, naming the operand by label
    when a label sits at that address.
    """
    opcode, operand = decode(word)
    if opcode not in mnemonic:
        return "??"
    name = mnemonic[opcode]
    if name not in takes_argument:
        return name
    if name == 'SKIPCOND':
        return "%s %03X" % (name, operand)
    if symbols:
        for label, address in symbols.items():
            if address == operand:
                return "%s %s" % (name, label)
    return "%s %s" % (name, addr_hex(operand))
