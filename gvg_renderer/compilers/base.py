# gvg_renderer/compilers/base.py
"""
Base compiler class providing the common interface for GVG backends.

This module defines the abstract base class every backend compiler inherits
from. It owns the dispatch table from AST command classes to handlers and the
recursive walk over command lists, while each backend decides what a handler
emits.
"""
import abc
import logging
from typing import Callable, Dict, Iterable, List, Type, Union

from ..core import Command, Glow, Program

logger = logging.getLogger(__name__)

Handler = Callable[[Command, int], list]


class BaseCompiler(abc.ABC):
    """
    Abstract base class for GVG compilers.

    Each compiler maintains a table of handlers keyed by AST command class.
    The walk threads the current glow depth through every call instead of
    keeping it on the instance, so a compiler holds no per-compile state.

    Subclasses register one handler per shape kind in `_register_shapes()` and
    implement `compile()`.

    Attributes:
        handlers (dict): Command class -> handler(command, depth) returning a list of outputs

    Examples:
        >>> class MyCompiler(BaseCompiler):
        ...     def _register_shapes(self):
        ...         self.handlers[Line] = lambda cmd, depth: [cmd]
        ...     def compile(self, program):
        ...         return self._compile_commands(program.commands, 0)
    """
    def __init__(self):
        self.handlers: Dict[Type[Command], Handler] = {}
        self._register_shapes()

    @abc.abstractmethod
    def _register_shapes(self):
        """Fills `self.handlers` with one entry per supported command class."""
        raise NotImplementedError

    @abc.abstractmethod
    def compile(self, program: Union[Program, Iterable[Command]]) -> list:
        """
        Compiles a program or bare command list into backend output.

        Args:
            program: Program root, or an ordered iterable of commands

        Returns:
            Ordered list of backend outputs, in program order
        """
        raise NotImplementedError

    def _compile_commands(self, commands: Iterable[object], depth: int) -> list:
        """
        Walks a command list in order and concatenates every handler's output.

        Glow scopes recurse with depth + 1, so their children's output lands
        inline in the parent's output. Entries with no handler are skipped
        with a warning.
        """
        output: List[object] = []
        for command in commands:
            if isinstance(command, Glow):
                output.extend(self._compile_commands(command.commands, depth + 1))
                continue
            handler = self._handler_for(command)
            if handler is None:
                if isinstance(command, Command):
                    logger.warning("Don't know what to do with %s", type(command).__name__)
                else:
                    logger.warning("Not a command, don't know what to do with %r", command)
                continue
            output.extend(handler(command, depth))
        return output

    def _handler_for(self, command: object):
        for cls in type(command).__mro__:
            if cls in self.handlers:
                return self.handlers[cls]
        return None
