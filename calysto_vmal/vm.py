"""
The VMAL virtual machine.

Sixteen registers, a sparse memory, the MAR/MBR pair and the N and Z
flags. Register 0 is the program counter; registers 5, 6 and 7 hold
the constants 0, 1 and all-ones.
"""

from __future__ import print_function

from .display import Options, format_registers


class VM(object):
    """
    Executes an assembled instruction stream. All register and memory
    values are kept masked to options.bits.
    """
    constant_registers = {0: 0, 5: 0, 6: 1}

    def __init__(self, register_inits=(), memory_inits=(), options=None, kernel=None):
        self.kernel = kernel
        self.options = options or Options()
        # Functions for interpreting instructions:
        self.apply = {
            'SA': self.SA,
            'RB': self.RB,
            'RD': self.RD,
            'WR': self.WR,
            'SB': self.SB,
            'SF': self.SF,
            'GO': self.GO,
            'BIN': self.BIN,
            'BIZ': self.BIZ,
            'ADD': self.ADD,
            'AND': self.AND,
            'MV': self.MV,
            'NOT': self.NOT,
            'RS': self.RS,
            'LS': self.LS,
            'SW': self.SW,
            'PRINT': self.PRINT,
        }
        self.initialize(register_inits, memory_inits)

    def initialize(self, register_inits=(), memory_inits=()):
        mask = self.options.mask
        self.registers = [0] * 16
        self.memory = {}
        self.mar = 0
        self.mbr = 0
        self.n = False
        self.z = False
        self.instruction_count = 0
        for register, value in register_inits:
            self.registers[register] = value & mask
        for register, value in self.constant_registers.items():
            self.registers[register] = value
        self.registers[7] = mask
        for location, value in memory_inits:
            self.memory[location] = value & mask

    def mask(self, value):
        return value & self.options.mask

    def Print(self, *args, **kwargs):
        if self.kernel:
            self.kernel.Print(*args, **kwargs)
        else:
            print(*args, **kwargs)

    #### State accessors; every write is traced when options.trace is on.
    def get_pc(self):
        return self.registers[0]

    def set_pc(self, value):
        # Branch targets are stored unmasked: a label may point at -1.
        self.registers[0] = value
        if self.options.trace:
            self.Print("    PC <= %s" % value)

    def increment_pc(self):
        self.registers[0] += 1

    def get_register(self, position):
        return self.registers[position]

    def set_register(self, position, value):
        self.registers[position] = self.mask(value)
        if self.options.trace:
            self.Print("    R%X <= %s" % (position, self.registers[position]))

    def get_memory(self, location):
        return self.memory.get(location, 0)

    def set_memory(self, location, value):
        self.memory[location] = self.mask(value)
        if self.options.trace:
            self.Print("    memory[%s] <= %s" % (location, self.memory[location]))

    def set_mar(self, value):
        self.mar = value
        if self.options.trace:
            self.Print("    MAR <= %s" % value)

    def set_mbr(self, value):
        self.mbr = value
        if self.options.trace:
            self.Print("    MBR <= %s" % value)

    def set_flags(self, n, z):
        self.n = n
        self.z = z
        if self.options.trace:
            self.Print("    N <= %s, Z <= %s" % (n, z))

    def flags(self):
        return {'N': self.n, 'Z': self.z}

    #### Execution
    def run(self, instructions):
        """
        Run until the program counter moves past the last instruction.
        """
        while self.get_pc() < len(instructions):
            self.step(instructions)
        return True

    def run_debug(self, instructions, read_line=None, render=None, erase=None):
        """
        Run interactively. Returns False if the operator quit before the
        program completed.
        """
        from .debugger import Debugger
        debugger = Debugger(self, instructions, read_line=read_line,
                            render=render, erase=erase)
        return debugger.run()

    def step(self, instructions):
        op, args = instructions[self.get_pc()]
        self.apply[op](*args)
        self.increment_pc()
        self.instruction_count += 1

    #### Instructions
    def SA(self, x):
        self.set_mar(self.get_register(x))

    def RB(self, x):
        self.set_register(x, self.mar)

    def RD(self):
        self.set_mbr(self.get_memory(self.mar))

    def WR(self):
        self.set_memory(self.mar, self.mbr)

    def SB(self, x):
        self.set_mbr(self.get_register(x))

    def SF(self, x):
        value = self.get_register(x)
        # N is set when the sign bit is clear.
        self.set_flags((value & self.options.sign_bit) == 0, value == 0)

    def GO(self, address):
        self.set_pc(address)

    def BIN(self, address):
        if self.n:
            self.set_pc(address)

    def BIZ(self, address):
        if self.z:
            self.set_pc(address)

    def ADD(self, a, b):
        self.set_register(a, self.get_register(a) + self.get_register(b))

    def AND(self, a, b):
        self.set_register(a, self.get_register(a) & self.get_register(b))

    def MV(self, a, b):
        self.set_register(a, self.get_register(b))

    def NOT(self, a, b):
        self.set_register(a, ~self.get_register(b))

    def RS(self, a, b):
        self.set_register(a, self.get_register(b) >> 1)

    def LS(self, a, b):
        self.set_register(a, self.get_register(b) << 1)

    def SW(self, a, b):
        self.set_mar(self.get_register(a))
        self.set_mbr(self.get_register(b))
        self.set_memory(self.mar, self.mbr)

    def PRINT(self):
        self.Print("\n".join(format_registers(self.registers, self.options)))
