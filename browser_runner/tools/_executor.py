"""Compile-and-run engine for submitted Playwright code."""

import asyncio
import builtins
import itertools
import keyword
import linecache
import traceback
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional, Union

from browser_runner.utils.logger import setup_logger

logger = setup_logger(__name__)

FUNCTION_NAME = "__playwright_code__"
SOURCE_PREFIX = "<playwright-code-"

_source_ids = itertools.count(1)


@dataclass(slots=True)
class Value:
    """Program returned something."""

    payload: Any


@dataclass(slots=True)
class NoValue:
    """Program ran for its side effects only."""


@dataclass(slots=True)
class Failure:
    """Program failed to compile or raised while running."""

    message: str
    trace: Optional[str] = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Failure":
        return cls(message=str(exc) or type(exc).__name__, trace=_format_trace(exc))


ExecutionOutcome = Union[Value, NoValue, Failure]

CompletionGate = Callable[[Callable[[], Awaitable[Any]]], Awaitable[Any]]


def _format_trace(exc: BaseException) -> Optional[str]:
    """Format the traceback, starting at the first frame of submitted code."""
    tb = exc.__traceback__
    if tb is None:
        return None

    probe = tb
    while probe is not None and not probe.tb_frame.f_code.co_filename.startswith(SOURCE_PREFIX):
        probe = probe.tb_next
    if probe is not None:
        tb = probe

    return "".join(traceback.format_exception(type(exc), exc, tb))


class CodeExecutor:
    """
    Runs a statement body as the body of an async function.

    The body sees exactly the names passed as bindings (as formal
    parameters) plus builtins. Nothing is cached: every call compiles a
    fresh function, so submissions are independent of each other.
    """

    @classmethod
    def build_source(cls, body: str, parameters: Iterable[str]) -> str:
        """
        Wrap a statement body into async function source.

        Args:
            body: Normalized statements, may be empty
            parameters: Names of the formal parameters

        Returns:
            Source text of ``async def __playwright_code__(...)``

        Raises:
            ValueError: If a parameter is not a usable identifier
        """
        names = list(parameters)
        for name in names:
            if not name.isidentifier() or keyword.iskeyword(name):
                raise ValueError(f"Invalid binding name: {name!r}")

        lines = body.split("\n") if body else ["pass"]
        indented = "\n".join(f"    {line}" for line in lines)
        return f"async def {FUNCTION_NAME}({', '.join(names)}):\n{indented}\n"

    @classmethod
    def source_filename(cls) -> str:
        """Unique pseudo-filename for one compiled submission."""
        return f"{SOURCE_PREFIX}{next(_source_ids)}>"

    @classmethod
    def compile(
        cls,
        body: str,
        parameters: Iterable[str],
        filename: Optional[str] = None,
    ) -> Callable[..., Awaitable[Any]]:
        """
        Compile body into a coroutine function.

        The generated source is registered in linecache under ``filename``
        so tracebacks show the submitted lines; callers own the entry.

        Raises:
            SyntaxError: If body is not a valid statement sequence
        """
        filename = filename or cls.source_filename()
        source = cls.build_source(body, parameters)

        linecache.cache[filename] = (
            len(source),
            None,
            source.splitlines(keepends=True),
            filename,
        )

        code_obj = compile(source, filename, "exec")
        namespace: dict[str, Any] = {"__builtins__": builtins, "__name__": FUNCTION_NAME}
        exec(code_obj, namespace)
        return namespace[FUNCTION_NAME]

    @classmethod
    async def invoke(
        cls, function: Callable[..., Awaitable[Any]], bindings: Mapping[str, Any]
    ) -> Union[Value, NoValue]:
        """Await the compiled function with bindings as keyword arguments."""
        result = await function(**bindings)

        if result is None:
            return NoValue()
        return Value(result)

    @classmethod
    async def run(
        cls,
        body: str,
        bindings: Mapping[str, Any],
        completion: Optional[CompletionGate] = None,
    ) -> ExecutionOutcome:
        """
        Compile and run body, converting anything it raises into a Failure.

        Only cancellation and KeyboardInterrupt propagate; SystemExit and
        other BaseExceptions raised by submitted code are reported.

        Args:
            body: Normalized statements
            bindings: Names made available to the body, e.g. {"page": page}
            completion: Optional gate wrapping the run, e.g. Tab.wait_for_completion

        Returns:
            Value, NoValue or Failure
        """
        logger.debug(f"Executing Playwright code: {body[:100]}...")
        filename = cls.source_filename()

        async def compile_and_invoke() -> Union[Value, NoValue]:
            function = cls.compile(body, bindings.keys(), filename=filename)
            return await cls.invoke(function, bindings)

        try:
            if completion is None:
                outcome = await compile_and_invoke()
            else:
                outcome = await completion(compile_and_invoke)
        except (asyncio.CancelledError, KeyboardInterrupt):
            raise
        except BaseException as e:
            logger.warning(f"Playwright code failed: {type(e).__name__}: {e}")
            return Failure.from_exception(e)
        finally:
            linecache.cache.pop(filename, None)

        logger.debug(f"Execution outcome: {type(outcome).__name__}")
        return outcome
