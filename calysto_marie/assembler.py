"""
Two-pass assembler for MARIE.

The first pass walks the source and binds every label to the address
of its line; the second pass encodes each line into a 16-bit word,
replacing symbolic operands by the addresses found in the first pass.
Both passes read the source through the same tokenizer.

    x, dec 5        // data word, x = 0
    load x
    output
    halt
"""

import logging
import re
from collections import namedtuple

from . import opcodes
from .errors import (AssemblyError, AssemblySyntaxError,
                     UndefinedSymbolError, UnknownInstructionError)

log = logging.getLogger(__name__)

MEMORY_SIZE = 1 << 12

label_pattern = re.compile(r'^(\w+),')
identifier_pattern = re.compile(r'^[A-Za-z_]\w*$')
separator_pattern = re.compile(r'[\s,]+')

SourceLine = namedtuple("SourceLine", "number text label tokens")

Program = namedtuple("Program", "words symbols source")

class AssemblyResult(namedtuple("AssemblyResult", "machine_code symbol_table error")):
    @property
    def success(self):
        return self.error is None

def split_line(text):
    """
    Drop a trailing // comment and split on whitespace and commas.
    """
    text = text.split("//", 1)[0]
    return [word for word in separator_pattern.split(text) if word]

def parse_line(text, number):
    """
    Return a SourceLine, or None when the line holds no instruction
    (blank, or only a comment).
    """
    stripped = text.strip()
    if not stripped or stripped.startswith("//"):
        return None
    match = label_pattern.match(stripped)
    tokens = split_line(stripped)
    if match:
        return SourceLine(number, text, match.group(1), tokens[1:])
    return SourceLine(number, text, None, tokens)

def parse_source(source):
    lines = []
    for number, text in enumerate(source.splitlines(), 1):
        line = parse_line(text, number)
        if line is not None:
            lines.append(line)
    return lines

class Assembler(object):
    """
    Translates MARIE source into machine words. After a successful
    assemble(), `symbols` maps label to address and `source` maps
    address to the 1-based line it came from.
    """
    def __init__(self):
        self.symbols = {}
        self.source = {}

    def assemble(self, text):
        lines = parse_source(text)
        self.first_pass(lines)
        log.debug("Symbol table: %s", self.symbols)
        words = self.second_pass(lines)
        return Program(words, dict(self.symbols), dict(self.source))

    def first_pass(self, lines):
        self.symbols = {}
        self.source = {}
        for address, line in enumerate(lines):
            if address >= MEMORY_SIZE:
                raise AssemblySyntaxError(
                    line.number,
                    "program does not fit in memory (%d words)" % MEMORY_SIZE)
            self.source[address] = line.number
            if line.label is None:
                continue
            if not identifier_pattern.match(line.label):
                raise AssemblySyntaxError(line.number, "Invalid label '%s'" % line.label)
            if opcodes.is_keyword(line.label):
                raise AssemblySyntaxError(
                    line.number, "label '%s' is a reserved word" % line.label)
            if line.label in self.symbols:
                raise AssemblySyntaxError(
                    line.number, "label '%s' is already defined at address %d" %
                    (line.label, self.symbols[line.label]))
            self.symbols[line.label] = address

    def second_pass(self, lines):
        return [self.encode(line) for line in lines]

    def encode(self, line):
        if not line.tokens:
            if line.label is not None:
                raise AssemblySyntaxError(
                    line.number, "label '%s' must be followed by an instruction" % line.label)
            raise AssemblySyntaxError(line.number, "expected an instruction")
        word, args = line.tokens[0], line.tokens[1:]
        name = word.upper()
        if not opcodes.is_keyword(name):
            raise UnknownInstructionError(line.number, "Unknown instruction: %s" % word)
        if name in opcodes.takes_argument:
            if not args:
                raise AssemblySyntaxError(
                    line.number, "Syntax error: instruction '%s' requires an argument" % word)
            if len(args) > 1:
                raise AssemblySyntaxError(
                    line.number, "Syntax error: instruction '%s' accepts only one argument" % word)
            operand = self.resolve_operand(line, name, args[0])
        elif args:
            raise AssemblySyntaxError(
                line.number, "Syntax error: instruction '%s' does not accept an argument" % word)
        else:
            operand = 0
        if name in opcodes.directives:
            return operand
        return opcodes.get_opcode(name) + operand

    def resolve_operand(self, line, name, word):
        if word in self.symbols:
            value = self.symbols[word]
        elif name == 'DEC':
            value = self.parse_literal(line, word, 10)
        elif name == 'HEX':
            value = self.parse_literal(line, word, 16)
        elif name == 'SKIPCOND':
            value = self.parse_condition(line, word)
        else:
            raise UndefinedSymbolError(line.number, "Undefined symbol: '%s'" % word)
        if name == 'SKIPCOND' and value not in opcodes.skip_conditions:
            raise AssemblySyntaxError(
                line.number, "Syntax error: instruction 'skipcond' requires a valid condition")
        return value

    def parse_literal(self, line, word, base):
        try:
            value = int(word, base)
        except ValueError:
            if identifier_pattern.match(word):
                raise UndefinedSymbolError(line.number, "Undefined symbol: '%s'" % word)
            raise AssemblySyntaxError(
                line.number, "Invalid %s literal: '%s'" %
                ("decimal" if base == 10 else "hexadecimal", word))
        # negative literals are stored as two's complement
        if -(1 << 15) <= value < 0:
            value += 1 << 16
        if not 0 <= value <= 0xFFFF:
            raise AssemblySyntaxError(
                line.number, "value %s does not fit in 16 bits" % word)
        return value

    def parse_condition(self, line, word):
        """
        Accept the condition either as its value (0, 1024, 2048) or in
        the usual MARIE hex spelling (000, 400, 800).
        """
        for base in (10, 16):
            try:
                value = int(word, base)
            except ValueError:
                continue
            if value in opcodes.skip_conditions:
                return value
        raise AssemblySyntaxError(
            line.number, "Syntax error: instruction 'skipcond' requires a valid condition")

def assemble(text):
    """
    Assemble text without raising: returns an AssemblyResult whose
    `error` is the first AssemblyError found, in which case no machine
    code is returned.
    """
    assembler = Assembler()
    try:
        program = assembler.assemble(text)
    except AssemblyError as exc:
        log.debug("Assembly failed: %s", exc)
        return AssemblyResult([], {}, exc)
    return AssemblyResult(program.words, program.symbols, None)
