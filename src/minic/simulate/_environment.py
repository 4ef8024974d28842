"""Variable store for a single run."""

from __future__ import annotations

from dataclasses import dataclass, field

from ._values import ArrayIndexOutOfRange, SimulationError, UndefinedVariable, wrap_int


@dataclass
class Environment:
    """Scalar and array variables of one run.

    Names are unique across both maps: declaring a name as a scalar
    removes any array of the same name and vice versa.

    A name can be bound (storage allocated by the binder) before its
    declaration runs.  Only names in *declared* may be read or written;
    a declaration inside a branch that never ran stays unusable.
    """

    scalars: dict[str, int] = field(default_factory=dict)
    arrays: dict[str, list[int]] = field(default_factory=dict)
    declared: set[str] = field(default_factory=set)

    def __contains__(self, name: object) -> bool:
        return name in self.scalars or name in self.arrays

    # -----------------------------------------------------------------------
    # Declarations
    # -----------------------------------------------------------------------

    def declare_scalar(self, name: str, value: int = 0, *, reached: bool = True) -> None:
        """Bind scalar *name*; *reached* False only allocates it."""
        self.arrays.pop(name, None)
        self.scalars[name] = wrap_int(value)
        self._mark(name, reached)

    def declare_array(
        self,
        name: str,
        values: list[int],
        length: int | None = None,
        *,
        reached: bool = True,
    ) -> None:
        """Bind *name* to a copy of *values*, zero-padded to *length*."""
        length = len(values) if length is None else length
        self.scalars.pop(name, None)
        self.arrays[name] = [wrap_int(v) for v in values] + [0] * (length - len(values))
        self._mark(name, reached)

    def _mark(self, name: str, reached: bool) -> None:
        if reached:
            self.declared.add(name)
        else:
            self.declared.discard(name)

    def _check_declared(self, name: str, line: int | None) -> None:
        if name in self.declared:
            return
        if name in self:
            raise UndefinedVariable(name, line, "its declaration was never executed")
        raise UndefinedVariable(name, line)

    # -----------------------------------------------------------------------
    # Scalar access
    # -----------------------------------------------------------------------

    def get(self, name: str, line: int | None = None) -> int:
        self._check_declared(name, line)
        if name in self.scalars:
            return self.scalars[name]
        if name in self.arrays:
            raise SimulationError(
                f"array '{name}' used as a value; index it like {name}[0]", line,
            )
        raise UndefinedVariable(name, line)

    def set(self, name: str, value: int, line: int | None = None) -> None:
        self._check_declared(name, line)
        if name not in self.scalars:
            if name in self.arrays:
                raise SimulationError(f"cannot assign to array '{name}' as a whole", line)
            raise UndefinedVariable(name, line)
        self.scalars[name] = wrap_int(value)

    # -----------------------------------------------------------------------
    # Array access
    # -----------------------------------------------------------------------

    def _array(self, name: str, line: int | None) -> list[int]:
        self._check_declared(name, line)
        if name in self.arrays:
            return self.arrays[name]
        if name in self.scalars:
            raise SimulationError(f"'{name}' is not an array and cannot be indexed", line)
        raise UndefinedVariable(name, line)

    def get_element(self, name: str, index: int, line: int | None = None) -> int:
        array = self._array(name, line)
        if index < 0 or index >= len(array):
            raise ArrayIndexOutOfRange(name, index, len(array), line)
        return array[index]

    def set_element(self, name: str, index: int, value: int, line: int | None = None) -> None:
        array = self._array(name, line)
        if index < 0 or index >= len(array):
            raise ArrayIndexOutOfRange(name, index, len(array), line)
        array[index] = wrap_int(value)

    def snapshot(self) -> dict[str, int | list[int]]:
        """A detached copy of every variable, for inspection and tests."""
        result: dict[str, int | list[int]] = dict(self.scalars)
        result.update({name: list(values) for name, values in self.arrays.items()})
        return result
