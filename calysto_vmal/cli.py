"""
Command-line runner: assemble a VMAL source file, run it and print the
final registers and memory.
"""

from __future__ import print_function

import argparse
import sys

from ._version import __version__
from .assembler import AssemblyError, assemble
from .debugger import DebugCommandError
from .display import (Options, clear_lines, format_code, format_memory,
                      format_registers)
from .vm import VM


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="vmal",
        description="Assemble and run a VMAL program",
    )
    parser.add_argument("input", help="Input VMAL source file")
    parser.add_argument("-d", "--debug", action="store_true",
                        help="Step through the program interactively")
    parser.add_argument("-u", "--unsigned", action="store_true",
                        help="Show values as unsigned integers")
    parser.add_argument("-b", "--binary", action="store_true",
                        help="Show values in binary")
    parser.add_argument("-t", "--trace", action="store_true",
                        help="Report every register, memory and flag write")
    parser.add_argument("--bits", type=int, default=32,
                        help="Integer width of registers and memory (default: 32)")
    parser.add_argument("--version", action="version",
                        version="vmal %s" % __version__)

    args = parser.parse_args(argv)
    if args.bits < 2:
        parser.error("--bits must be at least 2")

    try:
        with open(args.input, "r", encoding="utf-8") as f:
            source = f.read()
    except IOError as e:
        print("Error reading %s: %s" % (args.input, e), file=sys.stderr)
        return 1

    try:
        assembly = assemble(source)
    except AssemblyError as e:
        print(e, file=sys.stderr)
        return 1

    options = Options(bits=args.bits, unsigned=args.unsigned,
                      binary=args.binary, trace=args.trace)
    vm = VM(assembly.register_inits, assembly.memory_inits, options)
    if args.debug:
        print("\nAssembled Code:")
        print("\n".join(format_code(assembly.instructions)))
        try:
            completed = vm.run_debug(assembly.instructions,
                                     erase=clear_lines)
        except DebugCommandError as e:
            print(e, file=sys.stderr)
            return 2
        print()
    else:
        completed = vm.run(assembly.instructions)

    print("\n".join(format_registers(vm.registers, options)))
    if vm.memory:
        print("\n".join(format_memory(vm.memory, options)))
    return 0 if completed else 1


if __name__ == "__main__":
    sys.exit(main())
