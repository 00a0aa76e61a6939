"""
The MARIE machine: 4096 words of memory, five registers, and a
fetch-decode-execute loop.

Each Simulator is owned by whoever created it; nothing is shared
between instances. Callbacks are given at construction:

    sim = Simulator(on_output=print)
    sim.load_program([0x1003, 0x6000, 0x7000, 12])
    sim.run()

A program that executes INPUT with nothing queued does not block:
the machine goes to PAUSED, `run()` returns, and the caller supplies
values with `set_input()` and continues with `resume()`.
"""

import logging
import time
from collections import deque

from .errors import (ArithmeticOverflowError, ArithmeticUnderflowError,
                     InvalidConditionError, MachineError, RangeError,
                     SimulatorStateError, UnknownOpcodeError)
from .formats import addr_hex, mar_hex
from .opcodes import decode, disassemble

log = logging.getLogger(__name__)

MEMORY_SIZE = 1 << 12

IDLE = "Idle"
RUNNING = "Running"
PAUSED = "Paused"
HALTED = "Halted"

# register name -> width in bits
register_bits = {
    "AC": 16,
    "IR": 16,
    "MBR": 16,
    "MAR": 12,
    "PC": 12,
}

class Simulator(object):
    def __init__(self, delay=0, on_output=None, on_error=None,
                 on_input_requested=None, on_program_end=None):
        self.delay = delay
        self.on_output = on_output
        self.on_error = on_error
        self.on_input_requested = on_input_requested
        self.on_program_end = on_program_end
        self.apply = {
            0x0: self.JNS,
            0x1: self.LOAD,
            0x2: self.STORE,
            0x3: self.ADD,
            0x4: self.SUBT,
            0x5: self.INPUT,
            0x6: self.OUTPUT,
            0x7: self.HALT,
            0x8: self.SKIPCOND,
            0x9: self.JUMP,
            0xA: self.CLEAR,
            0xB: self.ADDI,
            0xC: self.JUMPI,
            0xD: self.LOADI,
            0xE: self.STOREI,
        }
        self.looping = False
        self.stepping = False
        self.reset()

    def reset(self):
        """
        Return to the state right after construction.
        """
        self.memory = [0] * MEMORY_SIZE
        self.register = dict((name, 0) for name in register_bits)
        self.input_queue = deque()
        self.output = []
        self.error = None
        self.instruction_count = 0
        self.state = IDLE

    #### Registers and memory. Every write is range checked; a bad
    #### value raises RangeError and leaves the old contents alone.

    def get_register(self, name):
        return self.register[name]

    def set_register(self, name, value):
        bits = register_bits[name]
        if not 0 <= value < (1 << bits):
            raise RangeError("%s value %s is out of bounds (0-%d)" %
                             (name, value, (1 << bits) - 1))
        self.register[name] = value

    def check_address(self, address):
        if not 0 <= address < MEMORY_SIZE:
            raise RangeError("Memory address %s is out of bounds (0-%d)" %
                             (address, MEMORY_SIZE - 1))

    def get_memory(self, address):
        self.check_address(address)
        return self.memory[address]

    def set_memory(self, address, value):
        self.check_address(address)
        if not 0 <= value <= 0xFFFF:
            raise RangeError("Memory value %s is out of bounds (0-65535)" % value)
        self.memory[address] = value

    def read_operand(self, address):
        value = self.get_memory(address)
        self.set_register("MBR", value)
        return value

    #### State machine

    @property
    def running(self):
        return self.state == RUNNING

    def set_state(self, state):
        if state != self.state:
            log.info("Simulation %s -> %s", self.state, state)
        self.state = state

    def load_program(self, words):
        words = list(words)
        if len(words) > MEMORY_SIZE:
            raise RangeError("Program of %d words does not fit in memory (%d words)" %
                             (len(words), MEMORY_SIZE))
        for address, word in enumerate(words):
            if not 0 <= word <= 0xFFFF:
                raise RangeError("Word %s at address %s is out of bounds (0-65535)" %
                                 (word, addr_hex(address)))
        self.memory = [0] * MEMORY_SIZE
        self.memory[:len(words)] = words
        for name in register_bits:
            self.register[name] = 0
        self.output = []
        self.error = None
        self.instruction_count = 0
        self.set_state(RUNNING)

    def step(self):
        """
        Execute one instruction and return the resulting state. A
        MachineError halts the machine and propagates to the caller.
        """
        if self.state != RUNNING:
            raise SimulatorStateError("Simulation is not running (%s)" % self.state)
        pc = self.get_register("PC")
        self.stepping = True
        try:
            self.fetch()
            opcode, address = decode(self.get_register("IR"))
            if opcode not in self.apply:
                raise UnknownOpcodeError("Unknown instruction opcode: %s" % opcode)
            self.apply[opcode](address)
        except MachineError as exc:
            self.error = exc
            self.set_state(HALTED)
            log.warning("Runtime error at %s: %s", addr_hex(pc), exc)
            raise
        finally:
            self.stepping = False
        # an INPUT that waited backed PC up to itself
        if not (opcode == 0x5 and self.get_register("PC") == pc):
            self.instruction_count += 1
        if log.isEnabledFor(logging.DEBUG):
            ir = self.get_register("IR")
            log.debug("%s: %s %-16s AC=%s PC=%s", addr_hex(pc), mar_hex(ir),
                      disassemble(ir), mar_hex(self.get_register("AC")),
                      addr_hex(self.get_register("PC")))
        return self.state

    def fetch(self):
        self.set_register("MAR", self.get_register("PC"))
        self.set_register("IR", self.get_memory(self.get_register("MAR")))
        self.set_register("PC", self.get_register("PC") + 1)

    def run(self, delay=None):
        """
        Step until the machine leaves RUNNING, sleeping `delay` seconds
        between steps. The state is checked once per step, so stop()
        takes effect within one interval.
        """
        if delay is None:
            delay = self.delay
        self.looping = True
        try:
            while self.state == RUNNING:
                try:
                    self.step()
                except MachineError as exc:
                    if self.on_error is None:
                        raise
                    self.on_error(exc)
                    break
                if delay and self.state == RUNNING:
                    time.sleep(delay)
        finally:
            self.looping = False
        return self.state

    def set_input(self, values):
        """
        Queue values for INPUT. All values are checked before any is
        queued.
        """
        values = list(values)
        for index, value in enumerate(values):
            if not 0 <= value <= 0xFFFF:
                raise RangeError("INPUT[%d] value %s is out of bounds (0-65535)" %
                                 (index, value))
        self.input_queue.extend(values)

    def resume(self, continue_run=True):
        if self.state == RUNNING:
            log.info("Simulation is already running")
            return self.state
        if self.state != PAUSED:
            raise SimulatorStateError("Cannot resume: simulation is %s" % self.state)
        self.set_state(RUNNING)
        # resumed from inside a callback: the active step or loop carries on
        if not continue_run or self.looping or self.stepping:
            return self.state
        return self.run()

    def stop(self):
        self.set_state(HALTED)
        if self.on_program_end:
            self.on_program_end()

    def get_output(self):
        return list(self.output)

    def get_state(self):
        return {
            "AC": self.register["AC"],
            "PC": self.register["PC"],
            "IR": self.register["IR"],
            "MAR": self.register["MAR"],
            "MBR": self.register["MBR"],
            "running": self.running,
            "state": self.state,
            "memory": list(self.memory),
            "output": self.get_output(),
        }

    #### Instructions; `address` is the 12-bit operand field

    def JNS(self, address):
        self.set_memory(address, self.get_register("PC"))
        self.set_register("PC", address + 1)

    def LOAD(self, address):
        self.set_register("AC", self.read_operand(address))

    def STORE(self, address):
        self.set_memory(address, self.get_register("AC"))

    def ADD(self, address):
        result = self.get_register("AC") + self.read_operand(address)
        if result > 0xFFFF:
            raise ArithmeticOverflowError("ADD overflow: result %s exceeds 16-bit limit" % result)
        self.set_register("AC", result)

    def SUBT(self, address):
        result = self.get_register("AC") - self.read_operand(address)
        if result < 0:
            raise ArithmeticUnderflowError("SUBT underflow: result %s is negative" % result)
        self.set_register("AC", result)

    def INPUT(self, address):
        if self.input_queue:
            self.set_register("AC", self.input_queue.popleft())
        else:
            # back up so the INPUT runs again once resumed
            self.set_register("PC", self.get_register("PC") - 1)
            self.set_state(PAUSED)
            if self.on_input_requested:
                self.on_input_requested()

    def OUTPUT(self, address):
        value = self.get_register("AC")
        if self.on_output:
            self.on_output(value)
        self.output.append(value)

    def HALT(self, address):
        self.set_state(HALTED)
        if self.on_program_end:
            self.on_program_end()

    def SKIPCOND(self, address):
        condition = (address >> 10) & 0b11
        ac = self.get_register("AC")
        if condition == 0b00:
            skip = bool(ac & 0x8000)
        elif condition == 0b01:
            skip = ac == 0
        elif condition == 0b10:
            skip = ac > 0 and not (ac & 0x8000)
        else:
            raise InvalidConditionError("Invalid SKIPCOND condition: %s" % condition)
        if skip:
            self.set_register("PC", self.get_register("PC") + 1)

    def JUMP(self, address):
        self.set_register("PC", address)

    def CLEAR(self, address):
        self.set_register("AC", 0)

    def ADDI(self, address):
        result = self.get_register("AC") + self.read_operand(self.get_memory(address))
        if result > 0xFFFF:
            raise ArithmeticOverflowError("ADDI overflow: result %s exceeds 16-bit limit" % result)
        self.set_register("AC", result)

    def JUMPI(self, address):
        self.set_register("PC", self.get_memory(address))

    def LOADI(self, address):
        self.set_register("AC", self.read_operand(self.get_memory(address)))

    def STOREI(self, address):
        self.set_memory(self.get_memory(address), self.get_register("AC"))
