"""
Abstract Syntax Tree (AST) node definitions for parametric expressions.

The AST is produced by the parser and turned into an evaluable closure
tree by the compiler.
"""

from dataclasses import dataclass, field
from typing import List, Any
from abc import ABC
from .tokens import SourceSpan, TokenType


@dataclass
class AstNode(ABC):
    """Base class for all AST nodes."""
    span: SourceSpan  # Source location for error reporting

    def accept(self, visitor: "AstVisitor") -> Any:
        """Accept a visitor for traversal."""
        method_name = f"visit_{self.__class__.__name__}"
        method = getattr(visitor, method_name, visitor.generic_visit)
        return method(self)


class AstVisitor(ABC):
    """Base class for AST visitors."""

    def generic_visit(self, node: AstNode) -> Any:
        raise NotImplementedError(f"No visitor for {node.__class__.__name__}")


@dataclass
class Expression(AstNode):
    """Base class for all expressions."""
    pass


@dataclass
class Number(Expression):
    """A numeric literal."""
    value: float


@dataclass
class Identifier(Expression):
    """A parameter, coordinate variable or constant reference."""
    name: str


@dataclass
class BinaryOp(Expression):
    """A binary operation (e.g., a + b, x <= 1, c & d)."""
    left: Expression
    operator: TokenType
    right: Expression


@dataclass
class UnaryOp(Expression):
    """A unary operation (-x, !c)."""
    operator: TokenType
    operand: Expression


@dataclass
class FunctionCall(Expression):
    """A built-in function call (e.g., sqrt(x), atan2(y, x))."""
    name: str
    arguments: List[Expression] = field(default_factory=list)


class NameCollector(AstVisitor):
    """Collect every identifier referenced by an expression."""

    def __init__(self):
        self.names: List[str] = []

    def visit_Number(self, node: Number) -> None:
        pass

    def visit_Identifier(self, node: Identifier) -> None:
        if node.name not in self.names:
            self.names.append(node.name)

    def visit_BinaryOp(self, node: BinaryOp) -> None:
        node.left.accept(self)
        node.right.accept(self)

    def visit_UnaryOp(self, node: UnaryOp) -> None:
        node.operand.accept(self)

    def visit_FunctionCall(self, node: FunctionCall) -> None:
        for arg in node.arguments:
            arg.accept(self)


def free_names(node: Expression) -> List[str]:
    """Return identifiers used by ``node`` in order of first appearance."""
    collector = NameCollector()
    node.accept(collector)
    return collector.names
