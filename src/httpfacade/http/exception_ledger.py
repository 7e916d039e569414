"""
=============================================================================
EXCEPTION LEDGER
=============================================================================

Errors caught while building a response can be recorded on it instead of
aborting. The response decides later whether to show them (debug mode)
or render the normal body.

    ledger.append(ValueError("bad id"))
    ledger.append(LookupError("no such user"), code=404)

    ledger.by_type(LookupError)   # [ExceptionRecord(LookupError, ...)]
    ledger.by_code(404)           # [ExceptionRecord(LookupError, ...)]
    ledger.by_message("nope")     # None (no matches)

Queries return None when nothing matches, never an empty list:

    matches = ledger.by_code(404)
    if matches is None:
        ...  # nothing recorded with that code

=============================================================================
"""

import logging
import traceback
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Type, Union


logger = logging.getLogger(__name__)


def _error_code(error: BaseException) -> int:
    # HTTP-flavoured errors carry status_code, others may carry code
    for attr in ("code", "status_code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return 0


@dataclass(frozen=True)
class ExceptionRecord:
    """
    An immutable snapshot of a captured exception.

    Attributes:
        error_type: The exception's class
        message: str(error)
        code: Numeric code (explicit, or taken from the exception)
        trace: Formatted traceback text
        error: The original exception object
    """

    error_type: Type[BaseException]
    message: str
    code: int = 0
    trace: str = ""
    error: Optional[BaseException] = field(default=None, compare=False, repr=False)

    @classmethod
    def capture(cls, error: BaseException, code: Optional[int] = None) -> "ExceptionRecord":
        trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        return cls(
            error_type=type(error),
            message=str(error),
            code=_error_code(error) if code is None else int(code),
            trace=trace,
            error=error,
        )

    def is_a(self, kind: Union[type, str]) -> bool:
        """
        Check the record's type against a class or a class name.

        Classes match through issubclass(), so base classes and ABCs the
        type is registered with match too. A name matches any class in
        the type's MRO, by __name__ or by qualified module path.
        """
        if isinstance(kind, str):
            return any(
                kind in (klass.__name__, f"{klass.__module__}.{klass.__qualname__}")
                for klass in self.error_type.__mro__
            )
        return issubclass(self.error_type, kind)

    def __str__(self) -> str:
        return self.trace.rstrip("\n") or f"{self.error_type.__name__}: {self.message}"


class ExceptionLedger:
    """Append-only, ordered list of ExceptionRecords."""

    def __init__(self):
        self._records: List[ExceptionRecord] = []

    def append(self, error: BaseException, code: Optional[int] = None) -> ExceptionRecord:
        """Capture an exception and add it to the ledger."""
        record = ExceptionRecord.capture(error, code)
        self._records.append(record)
        logger.debug("Captured %s: %s", record.error_type.__name__, record.message)
        return record

    @property
    def records(self) -> List[ExceptionRecord]:
        return list(self._records)

    # =========================================================================
    # QUERIES
    # =========================================================================

    @staticmethod
    def _or_none(matches: List[ExceptionRecord]) -> Optional[List[ExceptionRecord]]:
        return matches or None

    def by_type(self, kind: Union[type, str]) -> Optional[List[ExceptionRecord]]:
        return self._or_none([r for r in self._records if r.is_a(kind)])

    def by_message(self, message: str) -> Optional[List[ExceptionRecord]]:
        return self._or_none([r for r in self._records if r.message == message])

    def by_code(self, code: int) -> Optional[List[ExceptionRecord]]:
        code = int(code)
        return self._or_none([r for r in self._records if r.code == code])

    def has_type(self, kind: Union[type, str]) -> bool:
        return any(r.is_a(kind) for r in self._records)

    def has_message(self, message: str) -> bool:
        return any(r.message == message for r in self._records)

    def has_code(self, code: int) -> bool:
        code = int(code)
        return any(r.code == code for r in self._records)

    # =========================================================================
    # OUTPUT
    # =========================================================================

    def render(self) -> str:
        """Every record's text followed by a newline, in ledger order."""
        return "".join(f"{record}\n" for record in self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ExceptionRecord]:
        return iter(list(self._records))
