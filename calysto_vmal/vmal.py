"""
A VMAL session: the current assembly, the machine it runs on and the
display options, driven by source cells and % directives.
"""

from __future__ import print_function

import re
import sys

from .assembler import Assembly, AssemblyError, assemble
from .debugger import DebugCommandError
from .display import (Options, format_code, format_flags, format_memory,
                      format_registers)
from .vm import VM


class VMAL(object):
    """
    Assembles and runs VMAL programs for the Jupyter kernel and the
    command line.
    """
    directives = ["%bits", "%binary", "%code", "%debug", "%exe", "%labels",
                  "%mem", "%regs", "%reset", "%trace", "%unsigned"]

    def __init__(self, kernel=None, options=None):
        self.kernel = kernel
        self.options = options or Options()
        self.filename = ""
        # Debugger presentation hooks; None prints each block in full.
        self.render = None
        self.erase = None
        self.initialize()

    def initialize(self):
        self.assembly = Assembly()
        self.reset()

    def reset(self):
        self.vm = VM(self.assembly.register_inits, self.assembly.memory_inits,
                     self.options, kernel=self.kernel)

    def Print(self, *args, **kwargs):
        if self.kernel:
            self.kernel.Print(*args, **kwargs)
        else:
            print(*args, **kwargs)

    def Error(self, string):
        if self.kernel:
            self.kernel.Error(string)
        else:
            sys.stderr.write(string)

    def read_line(self, prompt):
        if self.kernel:
            return self.kernel.raw_input(prompt)
        return input(prompt)

    def print_lines(self, lines):
        self.Print("\n".join(lines))

    def dump_registers(self):
        self.print_lines(format_registers(self.vm.registers, self.options))
        self.print_lines(format_flags(self.vm.n, self.vm.z))

    def dump_memory(self):
        if self.vm.memory:
            self.print_lines(format_memory(self.vm.memory, self.options))
        else:
            self.Print("Memory is empty")

    def dump_code(self):
        self.Print("Assembled Code:")
        self.print_lines(format_code(self.assembly.instructions))

    def dump_labels(self):
        self.Print("Label", "Location")
        for label in sorted(self.assembly.labels):
            self.Print(label + ":", self.assembly.labels[label])

    def assemble(self, text):
        self.assembly = assemble(text)
        self.reset()
        return self.assembly

    def load(self, filename):
        self.filename = filename
        with open(filename) as fp:
            return fp.read()

    def run(self, debug=False, render=None, erase=None):
        """
        Run the current assembly on a fresh VM and report the outcome.
        """
        self.reset()
        if debug:
            completed = self.vm.run_debug(self.assembly.instructions,
                                          read_line=self.read_line,
                                          render=render or self.render,
                                          erase=erase or self.erase)
        else:
            completed = self.vm.run(self.assembly.instructions)
        self.Print("=" * 60)
        if completed:
            self.Print("Computation completed")
        else:
            self.Print("Computation ABORTED")
        self.Print("=" * 60)
        self.Print("Instructions:", self.vm.instruction_count)
        self.dump_registers()
        return completed

    def execute_file(self, filename, debug=False):
        text = self.load(filename)
        try:
            self.assemble(text)
        except AssemblyError as exc:
            self.Error(str(exc) + "\n")
            return False
        return self.run(debug=debug)

    def toggle(self, name):
        setattr(self.options, name, not getattr(self.options, name))
        self.Print("%s is now %s" % (name, ["off", "on"][int(getattr(self.options, name))]))

    def execute(self, text):
        words = [word.strip() for word in text.split()]
        if not words:
            return True
        if words[0].startswith("%"):
            if words[0] == "%exe" or words[0] == "%debug":
                try:
                    return self.run(debug=(words[0] == "%debug"))
                except DebugCommandError as exc:
                    self.Error("\nDebug session ended: %s\n" % exc)
                    return False
            elif words[0] == "%regs":
                self.dump_registers()
                return True
            elif words[0] == "%mem":
                self.dump_memory()
                return True
            elif words[0] == "%code":
                self.dump_code()
                return True
            elif words[0] == "%labels":
                self.dump_labels()
                return True
            elif words[0] == "%unsigned":
                self.toggle("unsigned")
                return True
            elif words[0] == "%binary":
                self.toggle("binary")
                return True
            elif words[0] == "%trace":
                self.toggle("trace")
                return True
            elif words[0] == "%bits":
                if (len(words) < 2 or re.fullmatch(r"[0-9]+", words[1]) is None
                        or int(words[1]) < 2):
                    self.Error("Usage: %bits WIDTH, where WIDTH is at least 2\n")
                    return False
                self.options.bits = int(words[1])
                self.reset()
                self.Print("Integer width is now %d bits" % self.options.bits)
                return True
            elif words[0] == "%reset":
                self.reset()
                self.dump_registers()
                return True
            else:
                self.Error("Invalid Interactive Magic Directive\nHint: %help")
                return False
        ### Else, must be code to assemble:
        try:
            self.assemble(text)
        except AssemblyError as exc:
            self.Error("\nAssemble error\n%s\n" % exc)
            return False
        self.Print("Assembled! Use %code to examine; use %exe to run.")
        return True
