"""Message bus routing commands to their handlers."""

import logging
from collections.abc import Callable

from plaudit.domain.errors import DomainError
from plaudit.interfaces.unit_of_work import AbstractUnitOfWork

from .commands import Command

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class NoHandlerForCommand(LookupError):
    """Exception raised when no handler is found for a command."""

    def __init__(self, cmd: Command) -> None:
        super().__init__(f"No handler found for command {type(cmd).__name__}")


class MessageBus:
    """Routes each command to the one handler registered for its type.

    Handlers are callables taking only the command; their other dependencies
    (unit of work, sanitizer, id generator, retry policy) are bound by
    `plaudit.bootstrap`. The bus returns whatever the handler returns, so
    callers get the created review or the recomputed aggregate back.

    Args:
        uow: The unit of work the handlers were built with. Exposed so that
            entrypoints can run queries against the same storage.
        command_handlers: A mapping of command types to their handlers.
    """

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        command_handlers: dict[type[Command], Callable[..., object]],
    ) -> None:
        self.uow = uow
        self._command_handlers = command_handlers

    def handle(self, cmd: Command) -> object:
        """Dispatch a command to its handler and return the handler's result.

        Raises:
            NoHandlerForCommand: If no handler is found for the command type.
            DomainError: If the handler rejects the command (logged at INFO).
            Exception: Anything else the handler raises, logged with traceback.
        """

        if handler := self._command_handlers.get(type(cmd)):
            handler_name = self._get_handler_name(handler)
            logger.debug("Handling command %s with handler %s", cmd, handler_name)
            try:
                return handler(cmd)
            except DomainError as e:
                logger.info("Command %s rejected: %s", type(cmd).__name__, e)
                raise
            except Exception:  # pylint: disable=broad-except
                logger.exception(
                    "Exception handling command %s with handler %s", cmd, handler_name
                )
                raise
        else:
            logger.error("No handler found for command %s", type(cmd).__name__)
            raise NoHandlerForCommand(cmd)

    @staticmethod
    def _get_handler_name(fn: Callable[..., object]) -> str:
        if hasattr(fn, "__name__"):
            return fn.__name__
        if hasattr(fn, "func") and hasattr(fn.func, "__name__"):
            return fn.func.__name__
        return repr(fn)
