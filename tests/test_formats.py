import unittest

from calysto_marie.errors import MarieError, RangeError
from calysto_marie.formats import format_value, parse_hex, parse_value
from calysto_marie.opcodes import disassemble, get_opcode, instruction_info

class TestParseValue(unittest.TestCase):

    def test_decimal(self):
        self.assertEqual(parse_value("42"), 42)
        self.assertEqual(parse_value("7"), 7)
        self.assertEqual(parse_value("-1"), 0xFFFF)

    def test_hex(self):
        self.assertEqual(parse_value("0x1F"), 31)
        self.assertEqual(parse_value("x1F"), 31)

    def test_binary(self):
        self.assertEqual(parse_value("0b101"), 5)

    def test_character(self):
        self.assertEqual(parse_value("A"), 65)
        self.assertEqual(parse_value("'a'"), 97)
        self.assertEqual(parse_value("x"), 120)

    def test_out_of_range(self):
        self.assertRaises(RangeError, parse_value, "70000")
        self.assertRaises(RangeError, parse_value, "-40000")

    def test_garbage(self):
        self.assertRaises(MarieError, parse_value, "hello")
        self.assertRaises(MarieError, parse_value, "--5")

    def test_non_ascii_digit_is_a_character(self):
        self.assertEqual(parse_value("\u00b2"), 0xB2)

class TestFormatValue(unittest.TestCase):

    def test_radixes(self):
        self.assertEqual(format_value(42), "42")
        self.assertEqual(format_value(42, "hex"), "x002A")
        self.assertEqual(format_value(5, "bin"), "0000000000000101")
        self.assertEqual(format_value(65, "ascii"), "A")
        self.assertEqual(format_value(7, "ascii"), "(7)")

    def test_bad_radix(self):
        self.assertRaises(MarieError, format_value, 1, "octal")

class TestParseHex(unittest.TestCase):

    def test_spellings(self):
        self.assertEqual(parse_hex("x010"), 16)
        self.assertEqual(parse_hex("0x1f"), 31)
        self.assertEqual(parse_hex("FFFF"), 0xFFFF)
        self.assertRaises(MarieError, parse_hex, "zz")

class TestOpcodes(unittest.TestCase):

    def test_table(self):
        self.assertEqual(len(instruction_info), 15)
        self.assertEqual(get_opcode("load"), 4096)
        self.assertEqual(get_opcode("STOREI"), 0xE000)
        self.assertIsNone(get_opcode("dec"))

    def test_disassemble(self):
        self.assertEqual(disassemble(0x1003, {"x": 3}), "LOAD x")
        self.assertEqual(disassemble(0x9005), "JUMP x005")
        self.assertEqual(disassemble(0x7000), "HALT")
        self.assertEqual(disassemble(0x8400), "SKIPCOND 400")
        self.assertEqual(disassemble(0xF000), "??")

if __name__ == '__main__':
    unittest.main()
