from metakernel import MetaKernel

from ._version import __version__
from .marie import MARIE

class CalystoMARIE(MetaKernel):
    implementation = 'MARIE'
    implementation_version = __version__
    language = 'Calysto MARIE'
    language_version = '0.1'
    banner = "Calysto MARIE - assembly language of the MARIE machine"
    language_info = {
        'name': 'marie',
        'mimetype': 'text/x-marie',
        'file_extension': '.mas',
    }
    kernel_json = {
        "argv": [
            "python",
            "-m", "calysto_marie",
            "-f", "{connection_file}"
        ],
        "display_name": "Calysto MARIE",
        "language": "marie",
        "codemirror_mode": "gas",
        "name": "calysto_marie",
    }

    def __init__(self, *args, **kwargs):
        super(CalystoMARIE, self).__init__(*args, **kwargs)
        self.marie = MARIE(self)

    def get_usage(self):
        return """This is the Calysto MARIE Jupyter kernel.

MARIE Interactive Magic Directives: 

 %bp [clear | HEXADDR]              - show, clear, or set breakpoints
 %cont                              - continue running
 %d                                 - toggle tracing of each step
 %delay SECONDS                     - pause between steps while running
 %dis [STARTHEX [STOPHEX]]          - dump memory as program
 %dump [STARTHEX [STOPHEX]]         - list memory in hex
 %exe                               - execute the program
 %input VALUE ...                   - queue values for INPUT
 %labels                            - show the symbol table
 %mem HEXLOCATION HEXVALUE          - set memory
 %output                            - show everything OUTPUT so far
 %pc HEXVALUE                       - set PC
 %radix dec | hex | bin | ascii     - how OUTPUT values are shown
 %reg REG HEXVALUE                  - set register REG (AC, IR, MAR, MBR, PC)
 %regs                              - show registers
 %reset                             - reset MARIE to start state
 %step                              - execute the next instruction

HEX values may begin with an 'x' or '0x'. INPUT values may be decimal,
hex (0x1F), binary (0b101), or a single character.

To get additional help on these items, use '%help %item'.

To see additional magics, use %lsmagic, and put a question mark after a magic 
name.
"""

    def get_completions(self, info):
        return self.marie.get_completions(info["help_obj"])

    def get_kernel_help_on(self, info, level=0, none_on_fail=False):
        expr = info["code"]
        if expr == "%bp":
            return """%bp - See, clear, or set a breakpoint.
See all of the breakpoints:
    %bp

Clear all of the breakpoints:
    %bp clear

Create a breakpoint at location x005:
    %bp x005
"""
        elif expr == "%cont":
            return """%cont - Continue executing the program after a breakpoint or INPUT
"""
        elif expr == "%dis":
            return """%dis - Disassemble memory
"""
        elif expr == "%dump":
            return """%dump - Dump memory
"""
        elif expr == "%exe":
            return """%exe - Load the assembled program and execute it
"""
        elif expr == "%input":
            return """%input - Queue values for INPUT instructions:
    %input 12 0x1F 0b101 A
"""
        elif expr == "%mem":
            return """%mem - Set a memory location
"""
        elif expr == "%pc":
            return """%pc - Set the Program Counter
"""
        elif expr == "%radix":
            return """%radix - Show OUTPUT values as dec, hex, bin, or ascii
"""
        elif expr == "%reg":
            return """%reg - Set a register
"""
        elif expr == "%regs":
            return """%regs - See the registers
"""
        elif expr == "%reset":
            return """%reset - Reset MARIE
"""
        elif expr == "%step":
            return """%step - Execute the next instruction
"""
        elif none_on_fail:
            return None
        else:
            return "No available help on '%s'" % expr

    def do_execute_direct(self, code):
        try:
            self.marie.execute(code.rstrip())
        except Exception as exc:
            self.Error(str(exc))
        except KeyboardInterrupt:
            self.Error("Keyboard Interrupt!")

    def do_is_complete(self, code):
        if code:
            if code.split()[-1].strip() != "":
                return {'status' : 'incomplete',
                        'indent': '    '}
            else:
                return {'status' : 'complete'}
        else:
            return {'status' : 'incomplete'}

    def repr(self, data):
        return repr(data)
