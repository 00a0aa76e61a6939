"""
Errors raised by the MARIE assembler and simulator.

Everything derives from ValueError so that code written against the
LC-3 style "raise ValueError(...)" convention keeps catching them.
"""

class MarieError(ValueError):
    pass

#### Assembly errors: always tied to a 1-based source line

class AssemblyError(MarieError):
    def __init__(self, line, message):
        super(AssemblyError, self).__init__(message)
        self.line = line
        self.message = message

    def __str__(self):
        return "line %s: %s" % (self.line, self.message)

    def as_dict(self):
        return {"line": self.line, "message": self.message}

class AssemblySyntaxError(AssemblyError):
    pass

class UndefinedSymbolError(AssemblyError):
    pass

class UnknownInstructionError(AssemblyError):
    pass

#### Machine errors: fatal to the current run

class MachineError(MarieError):
    pass

class RangeError(MachineError):
    pass

class ArithmeticOverflowError(MachineError):
    pass

class ArithmeticUnderflowError(MachineError):
    pass

class UnknownOpcodeError(MachineError):
    pass

class InvalidConditionError(MachineError):
    pass

class SimulatorStateError(MarieError):
    """
    The simulator was asked to do something its current state does
    not allow, such as stepping after HALT.
    """
    pass
