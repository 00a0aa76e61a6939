"""
An interactive MARIE session: assembles cells of source, runs them on
its own Simulator, and answers the %magic directives used from the
Jupyter kernel.
"""

import logging
import sys
import time

from .assembler import Assembler
from .errors import AssemblyError, MachineError, MarieError
from .formats import RADIXES, addr_hex, format_value, mar_hex, mar_int, parse_hex, parse_value
from .opcodes import disassemble, instruction_info, directives
from .simulator import HALTED, IDLE, PAUSED, RUNNING, Simulator, register_bits

log = logging.getLogger(__name__)

magics = ["%bp", "%cont", "%d", "%delay", "%dis", "%dump", "%exe", "%input",
          "%labels", "%mem", "%output", "%pc", "%radix", "%reg", "%regs",
          "%reset", "%step"]

def ascii_str(i):
    if 32 <= i < 127:
        return "(or %s, %s)" % (i, repr(chr(i)))
    return "(or %s)" % mar_int(i)

class MARIE(object):
    """
    The MARIE computer. This object can assemble, disassemble, and
    execute MARIE programs.
    """
    def __init__(self, kernel=None):
        self.kernel = kernel
        self.simulator = Simulator(on_output=self.handle_output,
                                   on_input_requested=self.handle_input_request)
        self.initialize()

    def initialize(self):
        self.debug = False
        self.radix = "dec"
        self.delay = 0
        self.max_steps = 100000
        self.breakpoints = {}
        self.suspended = False
        self.assembler = Assembler()
        self.program = None
        self.labels = {}
        self.source = {}
        self.simulator.reset()

    #### Input and output. Override these to hook up another front end.

    def Print(self, *args, end="\n"):
        print(*args, end=end)

    def Error(self, string):
        if self.kernel:
            self.kernel.Error(string)
        else:
            sys.stderr.write(string)

    def read_input(self, prompt):
        if self.kernel:
            return self.kernel.raw_input(prompt)
        return input(prompt)

    def handle_output(self, value):
        self.Print(format_value(value, self.radix))

    def handle_input_request(self):
        log.debug("Program requested input at %s",
                  addr_hex(self.simulator.get_register("PC")))

    def request_input(self):
        """
        Ask for values for a paused INPUT. Returns False when nothing
        was entered, leaving the machine paused.
        """
        text = self.read_input("Input: ")
        words = text.split() if text else []
        if not words:
            return False
        self.simulator.set_input([parse_value(word) for word in words])
        self.simulator.resume(continue_run=False)
        return True

    #### Assembling and running

    def assemble(self, text):
        self.program = self.assembler.assemble(text)
        self.labels = self.program.symbols
        self.source = self.program.source
        self.simulator.load_program(self.program.words)

    def step(self):
        pc = self.simulator.get_register("PC")
        self.simulator.step()
        if self.debug:
            ir = self.simulator.get_register("IR")
            line = self.source.get(pc, -1)
            line_str = (" [line %s]" % line) if (line != -1) else ""
            self.Print("(%s) %s: %s%s (PC*: %s)" % (
                self.simulator.instruction_count,
                addr_hex(pc),
                disassemble(ir, self.labels),
                line_str,
                addr_hex(self.simulator.get_register("PC"))))

    def run(self):
        self.suspended = False
        steps = 0
        while True:
            state = self.simulator.state
            if state == PAUSED:
                if not self.request_input():
                    break
            elif state != RUNNING:
                break
            self.step()
            steps += 1
            pc = self.simulator.get_register("PC")
            if self.simulator.running and pc in self.breakpoints:
                self.suspended = True
                self.Print("...breakpoint hit at", addr_hex(pc))
                break
            if self.max_steps and steps >= self.max_steps and self.simulator.running:
                self.suspended = True
                self.Error("Stopped after %d steps; use %%cont to keep going\n" % steps)
                break
            if self.delay and self.simulator.running:
                time.sleep(self.delay)

    def summary(self):
        self.Print("=" * 60)
        if self.simulator.state == PAUSED:
            self.Print("Computation PAUSED for input")
        elif self.suspended:
            self.Print("Computation SUSPENDED")
        else:
            self.Print("Computation completed")
        self.Print("=" * 60)
        self.Print("Instructions:", self.simulator.instruction_count)
        self.dump_registers()

    def runtime_error(self, exc):
        location = self.simulator.get_register("MAR")
        if location in self.source:
            self.Error("\nRuntime error:\n    line %s:\n%s\n" % (self.source[location], exc))
        else:
            self.Error("\nRuntime error:\n    memory %s\n%s\n" % (addr_hex(location), exc))

    #### Displays

    def dump_registers(self):
        self.Print()
        self.Print("=" * 60)
        self.Print("Registers:")
        self.Print("=" * 60)
        ac = self.simulator.get_register("AC")
        self.Print("AC: %s (%s)" % (mar_hex(ac), mar_int(ac)))
        self.Print("PC: %s  MAR: %s" % (addr_hex(self.simulator.get_register("PC")),
                                        addr_hex(self.simulator.get_register("MAR"))))
        self.Print("IR: %s  MBR: %s" % (mar_hex(self.simulator.get_register("IR")),
                                        mar_hex(self.simulator.get_register("MBR"))))
        self.Print("State:", self.simulator.state)

    def dump(self, orig_start=None, orig_stop=None, raw=False, header=True):
        start = 0 if orig_start is None else orig_start
        if orig_stop is None:
            stop = (max(self.source.keys()) + 1) if self.source else start + 10
        else:
            stop = orig_stop + 1
        if stop <= start:
            stop = start + 10
        if stop - start > 100:
            stop = start + 100
        stop = min(stop, len(self.simulator.memory))
        if raw:
            if header:
                self.Print("=" * 60)
                self.Print("Memory dump:")
                self.Print("=" * 60)
            for x in range(start, stop):
                self.Print("%-10s %s: %s" % ("", addr_hex(x), mar_hex(self.simulator.get_memory(x))))
        else:
            if header:
                self.Print("=" * 60)
                self.Print("Memory disassembled:")
                self.Print("=" * 60)
            for memory in range(start, stop):
                word = self.simulator.get_memory(memory)
                label = self.lookup(memory, "")
                if label:
                    label = label + ","
                line = self.source.get(memory, "")
                if line:
                    self.Print("%-10s %s: %s  %-24s [line: %s]" % (
                        label, addr_hex(memory), mar_hex(word),
                        disassemble(word, self.labels), line))
                else:
                    self.Print("%-10s %s: %s - %s %s" % (
                        label, addr_hex(memory), mar_hex(word), word, ascii_str(word)))

    def lookup(self, location, default=None):
        for label in self.labels:
            if self.labels[label] == location:
                return label
        if default is None:
            return location
        return default

    def show_breakpoints(self):
        if self.breakpoints:
            count = 1
            self.Print("=" * 60)
            self.Print("Breakpoints")
            self.Print("=" * 60)
            for memory in sorted(self.breakpoints.keys()):
                self.Print("    %d) " % count, end="")
                self.dump(memory, memory, header=False)
                count += 1
        else:
            self.Print("    No breakpoints set")

    #### Magics

    def execute(self, text):
        words = [word.strip() for word in text.split()]
        if not words:
            return True
        if words[0].startswith("%"):
            try:
                return self.magic(words[0], words[1:])
            except MachineError as exc:
                if words[0] in ("%exe", "%cont", "%step"):
                    self.runtime_error(exc)
                else:
                    self.Error("Error in %s: %s\n" % (words[0], exc))
            except (MarieError, ValueError, IndexError) as exc:
                self.Error("Error in %s: %s\nHint: %%help %s\n" % (words[0], exc, words[0]))
            return False
        ### Else, must be code to assemble:
        try:
            self.assemble(text)
        except AssemblyError as exc:
            self.Error("\nAssemble error\n    line %s\n%s\n" % (exc.line, exc.message))
            return False
        self.Print("Assembled! Use %dis or %dump to examine; use %exe to run.")
        return True

    def magic(self, name, args):
        if name == "%dump":
            self.dump(*[parse_hex(arg) for arg in args], raw=True)
        elif name == "%dis":
            self.dump(*[parse_hex(arg) for arg in args])
        elif name == "%regs":
            self.dump_registers()
        elif name == "%labels":
            self.Print("Label", "Location")
            for key in sorted(self.labels, key=self.labels.get):
                self.Print(key + ",", addr_hex(self.labels[key]))
        elif name == "%d":
            self.debug = not self.debug
            self.Print("Debug is now %s" % ["off", "on"][int(self.debug)])
        elif name == "%pc":
            self.simulator.set_register("PC", parse_hex(args[0]))
            self.dump_registers()
        elif name == "%mem":
            location = parse_hex(args[0])
            self.simulator.set_memory(location, parse_hex(args[1]))
            self.dump(location, location, raw=True, header=False)
        elif name == "%reg":
            register = args[0].upper()
            if register not in register_bits:
                raise MarieError("Unknown register '%s'; use one of %s" %
                                 (args[0], ", ".join(sorted(register_bits))))
            self.simulator.set_register(register, parse_hex(args[1]))
            self.dump_registers()
        elif name == "%bp":
            if args:
                if args[0] == "clear":
                    self.breakpoints = {}
                    self.Print("All breakpoints cleared")
                    return True
                self.breakpoints[parse_hex(args[0])] = True
            self.show_breakpoints()
        elif name == "%input":
            values = [parse_value(arg) for arg in args]
            self.simulator.set_input(values)
            self.Print("Queued input:", " ".join(format_value(v, self.radix) for v in values))
        elif name == "%output":
            self.Print(" ".join(format_value(v, self.radix)
                                for v in self.simulator.get_output()))
        elif name == "%radix":
            if args:
                if args[0] not in RADIXES:
                    raise MarieError("Invalid radix '%s'. Use one of: %s" %
                                     (args[0], ", ".join(RADIXES)))
                self.radix = args[0]
            self.Print("Output radix is %s" % self.radix)
        elif name == "%delay":
            if args:
                self.delay = float(args[0])
            self.Print("Step delay is %s seconds" % self.delay)
        elif name == "%reset":
            self.initialize()
            self.dump_registers()
        elif name == "%step":
            if self.simulator.state == PAUSED and not self.request_input():
                self.Print("Still waiting for input")
                return True
            orig_debug = self.debug
            self.debug = True
            try:
                self.step()
            finally:
                self.debug = orig_debug
            self.dump_registers()
        elif name in ("%exe", "%cont"):
            if name == "%exe":
                if self.program is None:
                    raise MarieError("No program; assemble some code first")
                self.simulator.load_program(self.program.words)
            elif self.simulator.state in (IDLE, HALTED):
                raise MarieError("Program is not running; use %exe to start it")
            self.run()
            self.summary()
        else:
            self.Error("Invalid Interactive Magic Directive\nHint: %help\n")
            return False
        return True

    def get_completions(self, token):
        matches = []
        for item in (sorted(instruction_info) + list(directives) +
                     list(self.labels.keys()) + magics):
            if item.upper().startswith(token.upper()) and item not in matches:
                matches.append(item)
        return matches
