from __future__ import print_function

from IPython.display import HTML
from metakernel import MetaKernel

from ._version import __version__
from .assembler import Assembler
from .vmal import VMAL


class CalystoVMAL(MetaKernel):
    implementation = 'VMAL'
    implementation_version = __version__
    language = 'Calysto VMAL'
    language_version = '0.1'
    banner = "Calysto VMAL - assembly language of a tiny register machine"
    language_info = {
        'name': 'gas',
        'mimetype': 'text/x-gas',
        'file_extension': '.vmal',
    }

    def __init__(self, *args, **kwargs):
        super(CalystoVMAL, self).__init__(*args, **kwargs)
        self.vmal = self.new_session()

    def new_session(self):
        vmal = VMAL(self)
        vmal.render = self.render_block
        vmal.erase = self.erase_block
        return vmal

    def render_block(self, lines):
        self.Display(HTML("<pre>" + "\n".join(lines) + "</pre>"))

    def erase_block(self, count):
        self.clear_output(wait=True)

    def get_usage(self):
        return """This is the Calysto VMAL Jupyter kernel.

VMAL Interactive Magic Directives:

 %bits WIDTH                        - set the integer width (default 32)
 %binary                            - toggle binary display of values
 %code                              - list the assembled program
 %debug                             - step through the program
 %exe                               - execute the program
 %labels                            - show labels and their addresses
 %mem                               - show non-empty memory
 %regs                              - show registers and flags
 %reset                             - reset the VM to its initial state
 %trace                             - toggle tracing of every write
 %unsigned                          - toggle unsigned display of values

While debugging, answer the prompt with n (step), b (toggle breakpoint),
c (continue till breakpoint), r (run to completion) or q (quit).

To get additional help on these items, use '%help %item'.

To see additional magics, use %lsmagic, and put a question mark after a magic
name.
"""

    def get_completions(self, info):
        token = info["help_obj"]
        matches = []
        for item in (sorted(Assembler.instruction_info) +
                     sorted(self.vmal.assembly.labels) +
                     self.vmal.directives):
            if item.startswith(token) and item not in matches:
                matches.append(item)
        return matches

    def get_kernel_help_on(self, info, level=0, none_on_fail=False):
        expr = info["code"]
        if expr == "%bits":
            return """%bits - Set the integer width of registers and memory.
Set a 16-bit machine:
    %bits 16
"""
        elif expr == "%binary":
            return """%binary - Toggle showing values in binary
"""
        elif expr == "%code":
            return """%code - List the assembled program
"""
        elif expr == "%debug":
            return """%debug - Step through the program

Commands at the prompt:
    n    execute the next instruction (also: empty input)
    b    toggle a breakpoint at the current instruction
    c    toggle continuing until the next breakpoint
    r    run to completion without prompting
    q    quit the debugger
"""
        elif expr == "%exe":
            return """%exe - Execute the program
"""
        elif expr == "%labels":
            return """%labels - Show labels and the address each is bound to
"""
        elif expr == "%mem":
            return """%mem - Show non-empty memory
"""
        elif expr == "%regs":
            return """%regs - See the registers and flags
"""
        elif expr == "%reset":
            return """%reset - Reset the VM to the assembled initial state
"""
        elif expr == "%trace":
            return """%trace - Toggle tracing of register, memory and flag writes
"""
        elif expr == "%unsigned":
            return """%unsigned - Toggle showing values as unsigned integers
"""
        elif none_on_fail:
            return None
        else:
            return "No available help on '%s'" % expr

    def do_execute_file(self, filename):
        self.vmal.execute_file(filename)

    def do_execute_direct(self, code):
        try:
            self.vmal.execute(code.rstrip())
        except Exception as exc:
            self.Error(str(exc))
        except KeyboardInterrupt:
            self.Error("Keyboard Interrupt!")

    def do_is_complete(self, code):
        if code:
            if code.split()[-1].strip() != "":
                return {'status': 'incomplete',
                        'indent': '    '}
            else:
                return {'status': 'complete'}
        else:
            return {'status': 'incomplete'}

    def repr(self, data):
        return repr(data)
