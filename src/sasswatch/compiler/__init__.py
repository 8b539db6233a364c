"""External compiler integration.

The stylesheet compiler itself is an external executable; this package only
builds its command line, runs it, and reports the outcome.
"""

from sasswatch.compiler.invoker import COMPILER_ARGS, SubprocessCompileInvoker
from sasswatch.compiler.protocol import CompileInvoker
from sasswatch.compiler.result import CompileResult

__all__ = [
    "COMPILER_ARGS",
    "CompileInvoker",
    "CompileResult",
    "SubprocessCompileInvoker",
]
