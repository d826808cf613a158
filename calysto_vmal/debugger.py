"""
Interactive stepping for the VMAL VM.

Before each instruction the debugger shows the register file, the
flags and the pending operation, then reads one command:

    n (or empty)  execute the instruction
    b             toggle a breakpoint at the current address
    c             toggle continue-till-breakpoint mode
    r             stop prompting and run to completion
    q             quit; the program does not complete

Presentation goes through two callbacks: render(lines) shows a block of
lines and erase(count) removes the last count lines of output,
including the line the cursor is on.
"""

from .display import format_flags, format_registers, op_to_string

DISPLAYING = "displaying"
AWAITING_COMMAND = "awaiting-command"
CONTINUING = "continuing"
TERMINATED = "terminated"


class DebugCommandError(ValueError):
    pass


class Debugger(object):
    prompt = "Debug (n,b,c,r,q): "
    commands = "nbcrq"

    def __init__(self, vm, instructions, read_line=None, render=None, erase=None):
        self.vm = vm
        self.instructions = instructions
        self.read_line = read_line or input
        self.render = render or self.print_lines
        self.erase = erase or (lambda count: None)
        self.breakpoints = set()
        self.cont = False
        self.interactive = True
        self.state = DISPLAYING
        self.line_count = 0

    def print_lines(self, lines):
        for line in lines:
            self.vm.Print(line)

    def show(self, lines):
        self.render(lines)
        self.line_count += len(lines)

    def toggle_breakpoint(self, location):
        if location in self.breakpoints:
            self.breakpoints.remove(location)
            return False
        self.breakpoints.add(location)
        return True

    def should_stop(self):
        if not self.interactive:
            return False
        return not self.cont or self.vm.get_pc() in self.breakpoints

    def run(self):
        """
        Step through the program. Returns True when the program counter
        runs past the last instruction, False if the operator quit.
        """
        while self.vm.get_pc() < len(self.instructions):
            if self.should_stop():
                self.interact()
                if self.state == TERMINATED:
                    return False
            self.vm.step(self.instructions)
        self.state = TERMINATED
        return True

    def display(self):
        vm = self.vm
        pc = vm.get_pc()
        lines = format_registers(vm.registers, vm.options)
        lines += format_flags(vm.n, vm.z)
        lines.append("")
        if self.cont:
            lines.append("Continue till Breakpoint")
        if pc in self.breakpoints:
            lines.append("BREAKPOINT")
        lines.append("Operation: %s" % op_to_string(self.instructions[pc]))
        self.show(lines)

    def read_command(self):
        try:
            text = self.read_line(self.prompt)
        except EOFError:
            text = ""
        self.line_count += 1
        text = text.strip()
        if not text:
            return "n", text
        return text[0].lower(), text

    def interact(self):
        self.state = DISPLAYING
        self.line_count = 0
        self.display()
        self.state = AWAITING_COMMAND
        while True:
            command, text = self.read_command()
            if command == "b":
                on = self.toggle_breakpoint(self.vm.get_pc())
                self.show(["Turning Breakpoint %s" % ("ON" if on else "OFF")])
                continue
            elif command == "n":
                pass
            elif command == "c":
                self.cont = not self.cont
            elif command == "r":
                self.interactive = False
            elif command == "q":
                self.state = TERMINATED
                return
            else:
                self.state = TERMINATED
                raise DebugCommandError(
                    "Unknown debug command '%s'; expected one of %s" %
                    (text, ", ".join(self.commands)))
            break
        self.erase(self.line_count + 1)
        if self.cont or not self.interactive:
            self.state = CONTINUING
        else:
            self.state = DISPLAYING
