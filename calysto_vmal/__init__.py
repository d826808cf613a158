from ._version import __version__
from .assembler import (Assembler, Assembly, AssemblyError,
                        AssemblySemanticError, AssemblySyntaxError,
                        Instruction, assemble)
from .debugger import DebugCommandError, Debugger
from .display import Options
from .vm import VM
