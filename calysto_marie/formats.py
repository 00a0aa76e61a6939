"""
Conversions between the integers the machine stores and the text a
person types or reads: input values in several radixes, and output
values shown in the radix the user picked.
"""

from .errors import MarieError, RangeError

RADIXES = ("dec", "hex", "bin", "ascii")

def mar_hex(h):
    """ Format the value in the form xFFFF """
    return 'x%04X' % (h & 0xFFFF)

def addr_hex(a):
    """ Format an address in the form xFFF """
    return 'x%03X' % (a & 0xFFF)

def mar_int(v):
    """ Interpret a 16-bit word as a signed value """
    if v & (1 << 15):
        return v - (1 << 16)
    return v

def is_composed_of(s, letters):
    return len(s) > 0 and all(c in letters for c in s)

def parse_hex(word):
    """
    Parse an address or value typed in a magic: x3A, 0x3A, or 3A.
    """
    word = word.strip()
    if word[:2].lower() == "0x":
        word = word[2:]
    elif word[:1].lower() == "x":
        word = word[1:]
    if not is_composed_of(word.upper(), "0123456789ABCDEF"):
        raise MarieError('Invalid hex value: "%s"' % word)
    return int(word, 16)

def parse_value(text):
    """
    Turn a typed input value into the plain integer the input queue
    expects. Accepts decimal (negative values are stored as two's
    complement), 0x/x hex, 0b binary, and a single character, bare or
    quoted.
    """
    s = text.strip()
    if len(s) == 3 and s[0] == s[-1] and s[0] in "'\"":
        value = ord(s[1])
    elif s[:2].lower() == "0x" or (s[:1] == "x" and len(s) > 1 and
                                   is_composed_of(s[1:].upper(), "0123456789ABCDEF")):
        value = parse_hex(s)
    elif s[:2].lower() == "0b" and is_composed_of(s[2:], "01"):
        value = int(s[2:], 2)
    elif is_composed_of(s[1:] if s[:1] == "-" else s, "0123456789"):
        value = int(s)
        if -(1 << 15) <= value < 0:
            value += 1 << 16
    elif len(s) == 1:
        value = ord(s)
    else:
        raise MarieError('Invalid input value: "%s"' % text)
    if not 0 <= value <= 0xFFFF:
        raise RangeError("input value %s is out of bounds (0-65535)" % text.strip())
    return value

def format_value(value, radix="dec"):
    """
    Render an output value for display; the value itself is never
    changed.
    """
    if radix == "dec":
        return str(value)
    elif radix == "hex":
        return mar_hex(value)
    elif radix == "bin":
        return '{0:016b}'.format(value & 0xFFFF)
    elif radix == "ascii":
        if 32 <= value < 127 or value in (9, 10, 13):
            return chr(value)
        return "(%s)" % value
    else:
        raise MarieError("Invalid radix '%s'. Use one of: %s" % (radix, ", ".join(RADIXES)))
