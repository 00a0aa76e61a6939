from ._version import __version__
from .assembler import Assembler, assemble
from .marie import MARIE
from .simulator import HALTED, IDLE, PAUSED, RUNNING, Simulator
