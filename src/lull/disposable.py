"""Disposal contract shared by long-lived lull objects."""

from abc import ABC, abstractmethod
from typing import Any, Self


class ObjectDisposedError(RuntimeError):
    """Raised when an operation is attempted on a disposed object."""

    def __init__(self, obj: object) -> None:
        self.object_name = type(obj).__name__
        super().__init__(f"{self.object_name} is disposed")


class Disposable(ABC):
    """Base class for objects that hold background work and must be torn down.

    Subclasses implement :meth:`dispose` and :attr:`disposed`. Disposal must
    be idempotent: calling it again after the first call is a no-op.

    Usage::

        async with SomeDisposable(...) as obj:
            ...
        # obj.dispose() has been awaited here
    """

    __slots__ = ()

    @property
    @abstractmethod
    def disposed(self) -> bool:
        """Whether :meth:`dispose` has been called."""

    @abstractmethod
    async def dispose(self) -> None:
        """Release the object's resources."""

    def _ensure_not_disposed(self) -> None:
        if self.disposed:
            raise ObjectDisposedError(self)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.dispose()
