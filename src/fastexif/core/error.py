"""Error taxonomy and best-effort partial results.

Every failure raised by fastexif is an :class:`Error`.  The hierarchy is
open-ended: new subclasses may appear, so callers handling specific kinds
should always keep an ``except Error`` fallback.

In continue-on-error mode the decoder does not stop at recoverable failures.
It finishes the pass and raises a single :class:`PartialResultError` carrying
the decoded :class:`~fastexif.core.model.Exif` and the errors it skipped::

    try:
        exif = read_exif_sync(path, continue_on_error=True)
    except Error as err:
        exif = err.distill_partial_result(lambda errors: log(errors))
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator, List, Tuple

if TYPE_CHECKING:
    from .model import Exif


class DecodeWarning(UserWarning):
    """Issued for each error skipped in continue-on-error mode."""


class Error(Exception):
    """Base class for every failure kind raised by fastexif."""

    @property
    def source(self) -> BaseException | None:
        """The underlying cause, if this error wraps one."""
        return None

    def distill_partial_result(self, handler: Callable[[List["Error"]], None]) -> "Exif":
        """Recover the partially decoded Exif from a :class:`PartialResultError`.

        The skipped errors are passed to ``handler`` and the Exif is returned.
        Any other kind of error is re-raised unchanged and ``handler`` is not
        called.  The payload is consumed, so this works once per error.
        """
        if not isinstance(self, PartialResultError):
            raise self
        exif, errors = self.partial.into_inner()
        handler(errors)
        return exif


class _MessageError(Error):
    """An error described by a fixed message string."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class InvalidFormatError(_MessageError):
    """Input data was malformed or truncated."""


class BlankValueError(_MessageError):
    """The field holds a blank ("unknown") value; treat it as absent."""


class TooBigError(_MessageError):
    """Field values or image data are too big to encode."""


class NotSupportedError(_MessageError):
    """The value representation or container is not supported."""


class UnexpectedValueError(_MessageError):
    """The field has a value its type does not allow."""


class NotFoundError(Error):
    """The container is well formed but holds no Exif data."""

    def __init__(self, container: str):
        super().__init__(container)
        self.container = container

    def __str__(self) -> str:
        return f"No Exif data found in {self.container}"

    def __repr__(self) -> str:
        return f"NotFoundError({self.container!r})"


class IoError(Error):
    """The byte source failed; the original exception is kept as ``source``."""

    def __init__(self, error: OSError | EOFError):
        super().__init__(error)
        self.error = error
        self.__cause__ = error

    @classmethod
    def from_os_error(cls, error: OSError | EOFError) -> "IoError":
        return cls(error)

    @property
    def source(self) -> OSError | EOFError:
        return self.error

    def __str__(self) -> str:
        return str(self.error)

    def __repr__(self) -> str:
        return f"IoError({self.error!r})"


class PartialResult:
    """Partially decoded Exif plus the errors skipped while decoding it.

    Only the decoder creates these.  The Exif sits behind a lock so the
    enclosing error can be handed between threads; nothing is expected to
    contend for it.
    """

    __slots__ = ("_lock", "_exif", "_errors", "_consumed")

    def __init__(self, exif: "Exif", errors: List[Error]):
        self._lock = threading.Lock()
        self._exif = exif
        self._errors = list(errors)
        self._consumed = False

    def counts(self) -> Tuple[int, int] | None:
        """(field count, error count), or None once consumed."""
        with self._lock:
            if self._consumed:
                return None
            return len(self._exif), len(self._errors)

    def into_inner(self) -> Tuple["Exif", List[Error]]:
        """Return the Exif and the skipped errors, consuming this result."""
        if not self._lock.acquire(blocking=False):
            raise RuntimeError("PartialResult lock is held during into_inner()")
        try:
            self._check_live()
            exif, errors = self._exif, self._errors
            self._exif, self._errors = None, None
            self._consumed = True
        finally:
            self._lock.release()
        return exif, errors

    def _check_live(self) -> None:
        if self._consumed:
            raise RuntimeError("PartialResult has already been consumed")

    def __repr__(self) -> str:
        with self._lock:
            if self._consumed:
                return "PartialResult(<consumed>)"
            return f"PartialResult(Exif({len(self._exif)} fields), {self._errors!r})"


class PartialResultError(Error):
    """Raised once, at the end of a continue-on-error decode with skipped errors."""

    def __init__(self, partial: PartialResult):
        super().__init__(partial)
        self.partial = partial

    def __str__(self) -> str:
        counts = self.partial.counts()
        if counts is None:
            return "Partial result (already distilled)"
        return "Partial result with %d fields and %d errors" % counts

    def __repr__(self) -> str:
        return f"PartialResultError({self.partial!r})"


@contextmanager
def io_errors() -> Iterator[None]:
    """Re-raise byte source failures escaping the block as :class:`IoError`."""
    try:
        yield
    except Error:
        raise
    except (OSError, EOFError) as e:
        raise IoError.from_os_error(e) from e
