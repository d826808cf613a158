"""
Two-pass assembler for VMAL source.

The first pass classifies each line as an initializer, a label
declaration or an instruction; branch instructions keep the label
name they refer to. The second pass replaces those names with the
instruction addresses recorded in the label table.

A label is bound to the address of the instruction *before* its
declaration. The VM increments the program counter after every
instruction, including a taken branch, so the next instruction
fetched is the first one after the label.
"""

import re
from collections import namedtuple

Instruction = namedtuple("Instruction", ["op", "args"])

PendingInstruction = namedtuple("PendingInstruction",
                                ["op", "args", "label", "lineno", "line"])


class AssemblyError(ValueError):
    """
    Raised on the first malformed line. Carries the 1-based line
    number and the offending source line.
    """
    def __init__(self, message, lineno, line):
        ValueError.__init__(self, message)
        self.message = message
        self.lineno = lineno
        self.line = line

    def __str__(self):
        return "Error on line #%d: %s\n\t>%s" % (self.lineno, self.message, self.line)


class AssemblySyntaxError(AssemblyError):
    pass


class AssemblySemanticError(AssemblyError):
    pass


class Assembly(object):
    """
    Result of a successful assembly: initializer lists and the
    resolved instruction stream.
    """
    def __init__(self, register_inits=None, memory_inits=None,
                 instructions=None, labels=None):
        self.register_inits = register_inits or []
        self.memory_inits = memory_inits or []
        self.instructions = instructions or []
        self.labels = labels or {}

    def __eq__(self, other):
        return (isinstance(other, Assembly) and
                self.register_inits == other.register_inits and
                self.memory_inits == other.memory_inits and
                self.instructions == other.instructions)

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return "Assembly(register_inits=%r, memory_inits=%r, instructions=%r)" % (
            self.register_inits, self.memory_inits, self.instructions)


IDENTIFIER = re.compile(r"[_a-zA-Z][_a-zA-Z0-9]*")
REGISTER = re.compile(r"[0-9a-fA-F]")

# (prefix, base, name reported on failure, digits)
LITERALS = [
    ("0x", 16, "hexadecimal", re.compile(r"[+-]?[0-9a-fA-F]+")),
    ("0b", 2, "binary", re.compile(r"[+-]?[01]+")),
]
DECIMAL = re.compile(r"[+-]?[0-9]+")


def is_identifier(s):
    return IDENTIFIER.fullmatch(s) is not None


def parse_number(s):
    """
    Parse a decimal, 0x hexadecimal or 0b binary literal. Raises
    ValueError naming the base that failed.
    """
    for prefix, base, name, digits in LITERALS:
        if s.startswith(prefix):
            body = s[len(prefix):]
            if digits.fullmatch(body) is None:
                raise ValueError(name)
            return int(body, base)
    if DECIMAL.fullmatch(s) is None:
        raise ValueError("character")
    return int(s, 10)


class Assembler(object):
    """
    Turns VMAL source text into an Assembly. One Assembler may be used
    for any number of assemble() calls; no state survives between them.
    """
    # Opcode numbers; LBL is a pseudo-op and never reaches the VM.
    instruction_info = {
        'SA': 0,
        'RB': 1,
        'RD': 2,
        'WR': 3,
        'SB': 4,
        'SF': 5,
        'LBL': -1,
        'GO': 6,
        'BIN': 7,
        'BIZ': 8,
        'ADD': 9,
        'AND': 10,
        'MV': 11,
        'NOT': 12,
        'RS': 13,
        'LS': 14,
        'SW': 15,
        'PRINT': 16,
    }
    label_ops = ('LBL', 'GO', 'BIN', 'BIZ')
    zero_arg_ops = ('RD', 'WR', 'PRINT')
    one_reg_ops = ('SA', 'RB', 'SB', 'SF')
    two_reg_ops = ('ADD', 'AND', 'MV', 'NOT', 'RS', 'LS', 'SW')

    def __init__(self):
        self.reset()

    def reset(self):
        self.register_inits = []
        self.memory_inits = []
        self.pending = []
        self.labels = {}

    def syntax_error(self, message):
        raise AssemblySyntaxError(message, self.lineno, self.line)

    def assemble(self, text):
        self.reset()
        # first pass:
        for lineno, line in enumerate(text.split("\n"), 1):
            self.lineno = lineno
            self.line = line
            self.process_line(line)
        # second pass:
        instructions = [self.resolve(pending) for pending in self.pending]
        assembly = Assembly(self.register_inits, self.memory_inits,
                            instructions, dict(self.labels))
        self.reset()
        return assembly

    def process_line(self, line):
        code = line.split("#", 1)[0].strip()
        if not code:
            return
        if ";" not in code:
            self.syntax_error("Missing semicolon")
        code, rest = code.split(";", 1)
        if rest.strip():
            self.syntax_error(
                "Extra non-comment character sequence after semicolon - '%s'" % rest)
        if ":" in code:
            self.process_initializer(code)
        else:
            self.process_instruction(code.strip())

    def process_initializer(self, code):
        location, value = [part.strip() for part in code.split(":", 1)]
        if len(location) == 1:
            if REGISTER.fullmatch(location) is None:
                self.syntax_error(
                    "Invalid register in register initializer - '%s'" % location)
            target = self.register_inits
            index = int(location, 16)
            kind = "register"
        elif location.startswith("[") and location.endswith("]"):
            target = self.memory_inits
            index = self.get_literal(location[1:-1], "memory")
            kind = "memory"
        else:
            self.syntax_error("Invalid syntax for register/memory initializer")
        target.append((index, self.get_literal(value, kind)))

    def get_literal(self, word, kind):
        try:
            return parse_number(word)
        except ValueError as exc:
            self.syntax_error('Invalid %s literal in %s initializer - "%s"' %
                              (exc, kind, word))

    def get_register(self, word):
        if REGISTER.fullmatch(word) is None:
            self.syntax_error("Invalid register specifier '%s'" % word)
        return int(word, 16)

    def check_arity(self, op, args, count, kind):
        if len(args) > count:
            self.syntax_error(
                "Too many arguments for %s operation (expected %s, got %d args)" %
                (op, kind, len(args)))
        if len(args) < count:
            self.syntax_error(
                "Not enough arguments for %s operation (expected %s, got %d args)" %
                (op, kind, len(args)))

    def process_instruction(self, code):
        words = code.split(None, 1)
        if not words:
            self.syntax_error("Empty statement")
        op = words[0].upper()
        if op not in self.instruction_info:
            self.syntax_error("Unknown operation '%s'" % op)
        args = []
        if len(words) > 1:
            args = [arg.strip() for arg in words[1].split(",")]
            args = [arg for arg in args if arg]

        if op in self.label_ops:
            self.check_arity(op, args, 1, "1 label")
            label = args[0]
            if not is_identifier(label):
                self.syntax_error("Label name is not a valid cname - '%s'" % label)
            if op == 'LBL':
                if label in self.labels:
                    raise AssemblySemanticError(
                        "Label '%s' already defined" % label, self.lineno, self.line)
                self.labels[label] = len(self.pending) - 1
                return
            self.pending.append(
                PendingInstruction(op, (), label, self.lineno, self.line))
        elif op in self.zero_arg_ops:
            self.check_arity(op, args, 0, "no arguments")
            self.pending.append(
                PendingInstruction(op, (), None, self.lineno, self.line))
        elif op in self.one_reg_ops:
            self.check_arity(op, args, 1, "1 register")
            self.pending.append(
                PendingInstruction(op, (self.get_register(args[0]),), None,
                                   self.lineno, self.line))
        else:
            self.check_arity(op, args, 2, "2 registers")
            registers = tuple(self.get_register(arg) for arg in args)
            self.pending.append(
                PendingInstruction(op, registers, None, self.lineno, self.line))

    def resolve(self, pending):
        if pending.label is None:
            return Instruction(pending.op, pending.args)
        if pending.label not in self.labels:
            raise AssemblySemanticError(
                "Undefined label reference - '%s'" % pending.label,
                pending.lineno, pending.line)
        return Instruction(pending.op, (self.labels[pending.label],))


def assemble(text):
    """
    Assemble VMAL source text. Raises AssemblyError (an AssemblySyntaxError
    or AssemblySemanticError) on the first malformed line.
    """
    return Assembler().assemble(text)
