"""
Text rendering of VMAL machine state: registers, flags, memory and
assembled code listings.
"""

import sys


class Options(object):
    """
    Configuration shared by the VM, the debugger and the printers.

    bits     - integer width of registers and memory cells
    unsigned - show values as unsigned integers
    binary   - show values in binary
    trace    - report every register, memory and flag write
    """
    def __init__(self, bits=32, unsigned=False, binary=False, trace=False):
        if bits < 2:
            raise ValueError("Integer width must be at least 2 bits, got %s" % bits)
        self.bits = bits
        self.unsigned = unsigned
        self.binary = binary
        self.trace = trace

    @property
    def mask(self):
        return (1 << self.bits) - 1

    @property
    def sign_bit(self):
        return 1 << (self.bits - 1)

    def __repr__(self):
        return "Options(bits=%r, unsigned=%r, binary=%r, trace=%r)" % (
            self.bits, self.unsigned, self.binary, self.trace)


def vm_int(value, bits=32):
    """ Interpret a masked value as a two's-complement integer """
    value &= (1 << bits) - 1
    if value & (1 << (bits - 1)):
        return value - (1 << bits)
    return value


def format_value(value, options):
    if options.binary:
        return "0b{0:0{1}b}".format(value & options.mask, options.bits)
    if options.unsigned:
        return "%d" % (value & options.mask)
    return "%d" % vm_int(value, options.bits)


def op_to_string(instruction):
    """
    Render an instruction the way it is written in source. Branches show
    the address that executes after the jump.
    """
    op, args = instruction
    if op in ('GO', 'BIN', 'BIZ'):
        return "%s %X" % (op, args[0] + 1)
    if not args:
        return op
    return "%s %s" % (op, ", ".join("%X" % arg for arg in args))


def format_code(instructions):
    return ["%4d: %s" % (i, op_to_string(op)) for i, op in enumerate(instructions)]


def format_registers(registers, options):
    lines = ["", "Registers: "]
    for i, value in enumerate(registers):
        lines.append("  %X: %s" % (i, format_value(value, options)))
    return lines


def format_flags(n, z):
    return ["Flags:", "  N: %s" % n, "  Z: %s" % z]


def format_memory(memory, options):
    lines = ["", "Memory:"]
    last = None
    for location in sorted(memory):
        if last is not None and location - last > 1:
            lines.append("  ... %d empty locations ..." % (location - last - 1))
        lines.append("  [%d]: %s" % (location, format_value(memory[location], options)))
        last = location
    return lines


def clear_lines(count, stream=None):
    """
    Erase the last count lines of a terminal and return the cursor to
    the start of the line.
    """
    stream = stream or sys.stdout
    for i in range(count):
        stream.write("\x1b[2K")
        if i < count - 1:
            stream.write("\x1b[1A")
    if count > 0:
        stream.write("\x1b[G")
    stream.flush()
