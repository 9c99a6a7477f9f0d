"""Expressions and conditions of the CORE language, plus the Node superclass every syntax tree node derives from.

```
<cond>    ::= "(" <op> <comp_op> <op> ")"       ; "comparison"
            | "!" <cond>                        ; "not"
            | "[" <cond> ("&&" | "||") <cond> "]"
<expr>    ::= <fac> (("+" | "-") <expr>)?       ; right-recursive: 5 - 2 - 1 = 5 - (2 - 1)
<fac>     ::= <op> ("*" <fac>)?                 ; right-recursive
<op>      ::= <integer> | <id> | "(" <expr> ")"
<comp_op> ::= "!=" | "==" | "<" | ">" | "<=" | ">="
```

Evaluation recurses exactly the way parsing does, so subtraction associates to the right. `&&` and `||` short
circuit: the right condition is never evaluated when the left one decides the result.
"""

import operator
from abc import ABC, abstractmethod
from dataclasses import dataclass

from corelang.grammar.context import wrap
from corelang.grammar.lexical import Kind, SPELLING
from corelang.lang.error import UndeclaredIdentifier, UnexpectedToken


class Node(ABC):
    """Superclass for every syntax tree node. Nodes own their children and hold no evaluation state."""
    INDENT = "    "
    FIRST = ()  # lexeme kinds that can start this node, used to pick between alternatives

    @classmethod
    @abstractmethod
    def parse(cls, ctx):
        """This method should consume exactly the lexemes of its production from ctx and return the new node,
        leaving ctx at the first lexeme past the production.
        """

    @abstractmethod
    def display(self, indents=0):
        """Returns canonical source text for this node, indented by indents levels where it starts a line."""

    @classmethod
    def first(cls):
        """Every lexeme kind that starts one of this class's alternatives."""
        return tuple(kind for subclass in cls.__subclasses__() for kind in subclass.FIRST)

    @classmethod
    def infer(cls, ctx):
        """Infers which subclass starts with the lookahead (by its FIRST kinds) and parses it. Raises UnexpectedToken
        if no alternative starts with the lookahead.
        """
        for subclass in cls.__subclasses__():
            if ctx.check(*subclass.FIRST):
                return subclass.parse(ctx)
        raise UnexpectedToken(cls.first(), ctx.lookahead)

    def __str__(self):
        return self.display()


class Operand(Node):
    """Superclass of <op> alternatives."""

    @abstractmethod
    def value(self, ctx):
        """Returns the integer value of this operand."""


@dataclass
class Integer(Operand):
    FIRST = (Kind.INTEGER,)
    number: int

    @classmethod
    def parse(cls, ctx):
        return cls(int(ctx.expect(Kind.INTEGER).text))

    def display(self, indents=0):
        return str(self.number)

    def value(self, ctx):
        return self.number


@dataclass
class Id(Operand):
    """Identifier reference. Outside the declaration section, the identifier must already be declared."""
    FIRST = (Kind.IDENTIFIER,)
    name: str

    @classmethod
    def parse(cls, ctx):
        if not ctx.check(Kind.IDENTIFIER):
            raise UnexpectedToken(cls.FIRST, ctx.lookahead)

        name = ctx.lookahead.text
        if not ctx.declaring and not ctx.symbols.is_declared(name):
            raise UndeclaredIdentifier(name)

        ctx.skip()
        return cls(name)

    def display(self, indents=0):
        return self.name

    def value(self, ctx):
        return ctx.symbols.read(self.name)


@dataclass
class Parenthesized(Operand):
    FIRST = (Kind.LPAREN,)
    expression: "Expression"

    @classmethod
    def parse(cls, ctx):
        ctx.expect(Kind.LPAREN)
        expression = Expression.parse(ctx)
        ctx.expect(Kind.RPAREN)
        return cls(expression)

    def display(self, indents=0):
        return f"({self.expression.display()})"

    def value(self, ctx):
        return self.expression.value(ctx)


@dataclass
class Factor(Node):
    operand: Operand
    rest: "Factor" = None

    @classmethod
    def parse(cls, ctx):
        operand = Operand.infer(ctx)
        rest = Factor.parse(ctx) if ctx.accept(Kind.STAR) else None
        return cls(operand, rest)

    def display(self, indents=0):
        if self.rest is None:
            return self.operand.display()
        return f"{self.operand.display()} * {self.rest.display()}"

    def value(self, ctx):
        left = self.operand.value(ctx)
        if self.rest is None:
            return left
        return wrap(left * self.rest.value(ctx))


@dataclass
class Expression(Node):
    factor: Factor
    op: Kind = None  # PLUS or MINUS when rest is set
    rest: "Expression" = None

    @classmethod
    def parse(cls, ctx):
        factor = Factor.parse(ctx)
        lexeme = ctx.accept(Kind.PLUS, Kind.MINUS)
        if lexeme is None:
            return cls(factor)
        return cls(factor, lexeme.kind, Expression.parse(ctx))

    def display(self, indents=0):
        if self.rest is None:
            return self.factor.display()
        return f"{self.factor.display()} {SPELLING[self.op]} {self.rest.display()}"

    def value(self, ctx):
        left = self.factor.value(ctx)
        if self.rest is None:
            return left

        right = self.rest.value(ctx)
        return wrap(left + right if self.op is Kind.PLUS else left - right)


class Condition(Node):
    """Superclass of <cond> alternatives."""

    @abstractmethod
    def evaluate(self, ctx):
        """Returns the truth value of this condition."""


@dataclass
class Comparison(Condition):
    FIRST = (Kind.LPAREN,)
    COMPARATORS = {
        Kind.NEQ: operator.ne,
        Kind.EQ: operator.eq,
        Kind.LT: operator.lt,
        Kind.GT: operator.gt,
        Kind.LTE: operator.le,
        Kind.GTE: operator.ge,
    }

    left: Operand
    op: Kind
    right: Operand

    @classmethod
    def parse(cls, ctx):
        ctx.expect(Kind.LPAREN)
        left = Operand.infer(ctx)
        op = ctx.expect(*Comparison.COMPARATORS).kind
        right = Operand.infer(ctx)
        ctx.expect(Kind.RPAREN)
        return cls(left, op, right)

    def display(self, indents=0):
        return f"({self.left.display()} {SPELLING[self.op]} {self.right.display()})"

    def evaluate(self, ctx):
        return Comparison.COMPARATORS[self.op](self.left.value(ctx), self.right.value(ctx))


@dataclass
class Not(Condition):
    FIRST = (Kind.NOT,)
    condition: Condition

    @classmethod
    def parse(cls, ctx):
        ctx.expect(Kind.NOT)
        return cls(Condition.infer(ctx))

    def display(self, indents=0):
        return f"!{self.condition.display()}"

    def evaluate(self, ctx):
        return not self.condition.evaluate(ctx)


@dataclass
class AndOr(Condition):
    FIRST = (Kind.LBRACKET,)
    left: Condition
    op: Kind  # AND or OR
    right: Condition

    @classmethod
    def parse(cls, ctx):
        ctx.expect(Kind.LBRACKET)
        left = Condition.infer(ctx)
        op = ctx.expect(Kind.AND, Kind.OR).kind
        right = Condition.infer(ctx)
        ctx.expect(Kind.RBRACKET)
        return cls(left, op, right)

    def display(self, indents=0):
        return f"[{self.left.display()} {SPELLING[self.op]} {self.right.display()}]"

    def evaluate(self, ctx):
        if self.op is Kind.AND:
            return self.left.evaluate(ctx) and self.right.evaluate(ctx)
        return self.left.evaluate(ctx) or self.right.evaluate(ctx)
