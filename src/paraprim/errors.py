"""
Error kinds raised or reported by primitives, and the aggregated
report produced by ``reevaluate()``.

Re-evaluation never stops at the first broken field: every failure is
added to an :class:`UpdateReport` so the caller sees all of them in one
pass.  Containment and bounding-box queries never raise these; they
degrade to ``False`` or an unbounded box instead.
"""

from typing import List, Optional


class PrimitiveError(Exception):
    """Base class for primitive errors."""

    def __init__(self, message: str, primitive_id: Optional[int] = None,
                 type_name: Optional[str] = None):
        self.primitive_id = primitive_id
        self.type_name = type_name
        super().__init__(message)

    @property
    def where(self) -> str:
        name = self.type_name or "Primitive"
        if self.primitive_id is None:
            return name
        return f"{name} (ID: {self.primitive_id})"

    def __str__(self) -> str:
        return f"Error in {self.where}: {self.args[0]}"


class ExpressionParseError(PrimitiveError):
    """A parametric field holds an expression that does not compile or evaluate."""

    def __init__(self, field: str, primitive_id: Optional[int] = None,
                 cause: Optional[BaseException] = None, type_name: Optional[str] = None):
        self.field = field
        self.cause = cause
        detail = cause.args[0] if cause is not None and cause.args else "expression error"
        super().__init__(f"{field}: {detail}", primitive_id, type_name)


class ParameterMismatchError(PrimitiveError):
    """The parameter set changed size since a user defined function was compiled."""

    def __init__(self, compiled_count: int, current_count: int,
                 primitive_id: Optional[int] = None, type_name: Optional[str] = None):
        self.compiled_count = compiled_count
        self.current_count = current_count
        super().__init__(
            f"compiled against {compiled_count} parameters, now {current_count}",
            primitive_id, type_name,
        )


class UnknownCoordinateSystem(PrimitiveError):
    """Unsupported coordinate system tag on a user defined primitive."""

    def __init__(self, tag, primitive_id: Optional[int] = None,
                 type_name: Optional[str] = None):
        self.tag = tag
        super().__init__(f"unknown coordinate system {tag!r}", primitive_id, type_name)


class InvalidInput(PrimitiveError):
    """Absent query point or degenerate geometric input."""
    pass


class UpdateReport:
    """Collects every failure from one or more ``reevaluate()`` calls."""

    def __init__(self, errors: Optional[List[PrimitiveError]] = None):
        self._errors: List[PrimitiveError] = list(errors or [])

    def add(self, error: PrimitiveError) -> None:
        self._errors.append(error)

    def merge(self, other: "UpdateReport") -> "UpdateReport":
        """Append all errors of ``other``; returns self for chaining."""
        self._errors.extend(other.errors)
        return self

    @property
    def errors(self) -> List[PrimitiveError]:
        return list(self._errors)

    @property
    def ok(self) -> bool:
        return not self._errors

    @property
    def error_count(self) -> int:
        return len(self._errors)

    def messages(self) -> List[str]:
        return [str(err) for err in self._errors]

    def format(self) -> str:
        """Format all errors, one per line."""
        if self.ok:
            return "ok"
        return "\n".join(self.messages())

    def __bool__(self) -> bool:
        return self.ok

    def __len__(self) -> int:
        return len(self._errors)

    def __iter__(self):
        return iter(self._errors)

    def __repr__(self) -> str:
        return f"UpdateReport(errors={len(self._errors)})"
