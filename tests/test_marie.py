import unittest

from calysto_marie.marie import MARIE
from calysto_marie.simulator import HALTED, PAUSED, RUNNING

COUNTDOWN = """loop, load n
skipcond 800
jump done
output
subt one
store n
jump loop
done, halt
n, dec 3
one, dec 1"""

class QuietMARIE(MARIE):
    def __init__(self, inputs=None):
        self.printed = []
        self.errors = []
        self.inputs = list(inputs or [])
        super(QuietMARIE, self).__init__()

    def Print(self, *args, end="\n"):
        self.printed.append(" ".join(str(arg) for arg in args))

    def Error(self, string):
        self.errors.append(string)

    def read_input(self, prompt):
        if self.inputs:
            return self.inputs.pop(0)
        return ""

class TestAssembling(unittest.TestCase):

    def test_assembled(self):
        m = QuietMARIE()
        self.assertTrue(m.execute(COUNTDOWN))
        self.assertIn("Assembled", m.printed[-1])
        self.assertEqual(m.labels["n"], 8)
        self.assertEqual(m.simulator.get_memory(8), 3)

    def test_assemble_error(self):
        m = QuietMARIE()
        self.assertFalse(m.execute("halt\nload q"))
        self.assertIn("line 2", m.errors[0])
        self.assertIn("Undefined symbol", m.errors[0])

class TestRunning(unittest.TestCase):

    def test_exe(self):
        m = QuietMARIE()
        m.execute(COUNTDOWN)
        self.assertTrue(m.execute("%exe"))
        self.assertEqual(m.simulator.get_output(), [3, 2, 1])
        self.assertIn("Computation completed", m.printed)
        self.assertEqual(m.simulator.state, HALTED)

    def test_exe_twice_starts_over(self):
        m = QuietMARIE()
        m.execute(COUNTDOWN)
        m.execute("%exe")
        m.execute("%exe")
        self.assertEqual(m.simulator.get_output(), [3, 2, 1])

    def test_radix(self):
        m = QuietMARIE()
        m.execute(COUNTDOWN)
        m.execute("%radix hex")
        m.execute("%exe")
        self.assertIn("x0003", m.printed)
        self.assertFalse(m.execute("%radix octal"))

    def test_queued_input(self):
        m = QuietMARIE()
        m.execute("input\noutput\nhalt")
        m.execute("%input 0x41")
        m.execute("%exe")
        self.assertEqual(m.simulator.get_output(), [65])

    def test_prompted_input(self):
        m = QuietMARIE(inputs=["4 5"])
        m.execute("input\noutput\ninput\noutput\nhalt")
        m.execute("%exe")
        self.assertEqual(m.simulator.get_output(), [4, 5])

    def test_pause_then_cont(self):
        m = QuietMARIE()
        m.execute("input\noutput\nhalt")
        m.execute("%exe")
        self.assertEqual(m.simulator.state, PAUSED)
        self.assertIn("Computation PAUSED for input", m.printed)
        m.inputs = ["9"]
        m.execute("%cont")
        self.assertEqual(m.simulator.get_output(), [9])
        self.assertEqual(m.simulator.state, HALTED)

    def test_breakpoint(self):
        m = QuietMARIE()
        m.execute(COUNTDOWN)
        m.execute("%bp x003")
        m.execute("%exe")
        self.assertTrue(m.suspended)
        self.assertEqual(m.simulator.get_register("PC"), 3)
        self.assertEqual(m.simulator.get_output(), [])
        self.assertIn("...breakpoint hit at x003", m.printed)
        m.execute("%cont")
        self.assertEqual(m.simulator.get_output(), [3])
        m.execute("%bp clear")
        m.execute("%cont")
        self.assertEqual(m.simulator.get_output(), [3, 2, 1])

    def test_step(self):
        m = QuietMARIE()
        m.execute(COUNTDOWN)
        self.assertTrue(m.execute("%step"))
        self.assertEqual(m.simulator.get_register("AC"), 3)
        self.assertEqual(m.simulator.get_register("PC"), 1)
        self.assertFalse(m.debug)

    def test_runtime_error(self):
        m = QuietMARIE()
        m.execute("load a\nadd b\nhalt\na, hex FFFF\nb, dec 1")
        self.assertFalse(m.execute("%exe"))
        self.assertIn("line 2", m.errors[0])
        self.assertIn("overflow", m.errors[0])

    def test_step_limit(self):
        m = QuietMARIE()
        m.max_steps = 50
        m.execute("loop, jump loop")
        m.execute("%exe")
        self.assertTrue(m.suspended)
        self.assertIn("Stopped after 50 steps", m.errors[0])
        self.assertEqual(m.simulator.state, RUNNING)

    def test_exe_without_program(self):
        m = QuietMARIE()
        self.assertFalse(m.execute("%exe"))
        self.assertIn("No program", m.errors[0])

class TestMagics(unittest.TestCase):

    def test_set_register_and_memory(self):
        m = QuietMARIE()
        self.assertTrue(m.execute("%reg ac 2A"))
        self.assertEqual(m.simulator.get_register("AC"), 42)
        self.assertTrue(m.execute("%mem x010 FFFF"))
        self.assertEqual(m.simulator.get_memory(16), 0xFFFF)
        self.assertTrue(m.execute("%pc x005"))
        self.assertEqual(m.simulator.get_register("PC"), 5)

    def test_bad_register(self):
        m = QuietMARIE()
        self.assertFalse(m.execute("%reg zz 1"))
        self.assertFalse(m.execute("%pc x1000"))

    def test_unknown_magic(self):
        m = QuietMARIE()
        self.assertFalse(m.execute("%frobnicate"))

    def test_labels_and_dis(self):
        m = QuietMARIE()
        m.execute(COUNTDOWN)
        m.execute("%labels")
        self.assertIn("n, x008", m.printed)
        m.execute("%dis")
        self.assertTrue(any("LOAD n" in line and "[line: 1]" in line
                            for line in m.printed))

    def test_dump(self):
        m = QuietMARIE()
        m.execute(COUNTDOWN)
        m.execute("%dump x008 x009")
        self.assertTrue(m.printed[-2].endswith("x008: x0003"))
        self.assertTrue(m.printed[-1].endswith("x009: x0001"))

    def test_debug_toggle(self):
        m = QuietMARIE()
        m.execute("%d")
        self.assertTrue(m.debug)
        m.execute("%d")
        self.assertFalse(m.debug)

    def test_reset(self):
        m = QuietMARIE()
        m.execute(COUNTDOWN)
        m.execute("%reset")
        self.assertIsNone(m.program)
        self.assertEqual(m.labels, {})

    def test_completions(self):
        m = QuietMARIE()
        m.execute(COUNTDOWN)
        self.assertEqual(m.get_completions("load"), ["LOAD", "LOADI"])
        self.assertIn("loop", m.get_completions("lo"))
        self.assertIn("%exe", m.get_completions("%e"))

if __name__ == '__main__':
    unittest.main()
