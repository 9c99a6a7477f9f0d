"""Recursive-descent parsing of CORE programs into a syntax tree, which can then be displayed (pretty-printed) or
executed. Expressions and conditions live in expression.py.

```
<program>  ::= "program" <decl_seq> "begin" <stmt_seq> "end"
<decl_seq> ::= <decl>+                  ; identifiers may only be declared here, each exactly once
<decl>     ::= "int" <id_list> ";"
<id_list>  ::= <id> ("," <id>)*
<stmt_seq> ::= <stmt>+                  ; every identifier used here must already be declared
<stmt>     ::= <assign> | <if> | <loop> | <in> | <out>
<assign>   ::= <id> "=" <expr> ";"
<if>       ::= "if" <cond> "then" <stmt_seq> ("else" <stmt_seq>)? "end" ";"
<loop>     ::= "while" <cond> "loop" <stmt_seq> "end" ";"
<in>       ::= "read" <id_list> ";"
<out>      ::= "write" <id_list> ";"
```

Which <stmt> to parse is decided by the lookahead alone (see Node.infer).
"""

from abc import abstractmethod
from dataclasses import dataclass

from corelang.grammar.expression import Condition, Expression, Id, Node
from corelang.grammar.lexical import Kind


@dataclass
class IdList(Node):
    ids: list

    @classmethod
    def parse(cls, ctx):
        ids = [Id.parse(ctx)]
        while ctx.accept(Kind.COMMA):
            ids.append(Id.parse(ctx))
        return cls(ids)

    @property
    def names(self):
        return [id_.name for id_ in self.ids]

    def display(self, indents=0):
        return ", ".join(id_.display() for id_ in self.ids)


@dataclass
class Declaration(Node):
    ids: IdList

    @classmethod
    def parse(cls, ctx):
        ctx.expect(Kind.INT)
        ids = IdList.parse(ctx)
        for name in ids.names:
            ctx.symbols.declare(name)
        ctx.expect(Kind.SEMICOLON)
        return cls(ids)

    def display(self, indents=0):
        return f"{Node.INDENT * indents}int {self.ids.display()};"


@dataclass
class DeclarationSequence(Node):
    declarations: list

    @classmethod
    def parse(cls, ctx):
        ctx.declaring = True
        try:
            declarations = [Declaration.parse(ctx)]
            while ctx.check(Kind.INT):
                declarations.append(Declaration.parse(ctx))
        finally:
            ctx.declaring = False
        return cls(declarations)

    def display(self, indents=0):
        return "\n".join(decl.display(indents) for decl in self.declarations)


class Statement(Node):
    """Superclass of <stmt> alternatives."""

    @abstractmethod
    def execute(self, ctx):
        """Runs this statement against ctx.symbols and ctx.data, appending any output to ctx.output."""


@dataclass
class StatementSequence(Node):
    statements: list

    @classmethod
    def parse(cls, ctx):
        statements = [Statement.infer(ctx)]
        while ctx.check(*Statement.first()):
            statements.append(Statement.infer(ctx))
        return cls(statements)

    def display(self, indents=0):
        return "\n".join(stmt.display(indents) for stmt in self.statements)

    def execute(self, ctx):
        for stmt in self.statements:
            stmt.execute(ctx)


@dataclass
class Assignment(Statement):
    FIRST = (Kind.IDENTIFIER,)
    target: Id
    expression: Expression

    @classmethod
    def parse(cls, ctx):
        target = Id.parse(ctx)
        ctx.expect(Kind.ASSIGN)
        expression = Expression.parse(ctx)
        ctx.expect(Kind.SEMICOLON)
        return cls(target, expression)

    def display(self, indents=0):
        return f"{Node.INDENT * indents}{self.target.display()} = {self.expression.display()};"

    def execute(self, ctx):
        ctx.symbols.write(self.target.name, self.expression.value(ctx))


@dataclass
class If(Statement):
    FIRST = (Kind.IF,)
    condition: Condition
    then: StatementSequence
    otherwise: StatementSequence = None

    @classmethod
    def parse(cls, ctx):
        ctx.expect(Kind.IF)
        condition = Condition.infer(ctx)
        ctx.expect(Kind.THEN)
        then = StatementSequence.parse(ctx)
        otherwise = StatementSequence.parse(ctx) if ctx.accept(Kind.ELSE) else None
        ctx.expect(Kind.END)
        ctx.expect(Kind.SEMICOLON)
        return cls(condition, then, otherwise)

    def display(self, indents=0):
        pad = Node.INDENT * indents
        lines = [f"{pad}if {self.condition.display()} then", self.then.display(indents + 1)]
        if self.otherwise is not None:
            lines += [f"{pad}else", self.otherwise.display(indents + 1)]
        lines.append(f"{pad}end;")
        return "\n".join(lines)

    def execute(self, ctx):
        if self.condition.evaluate(ctx):
            self.then.execute(ctx)
        elif self.otherwise is not None:
            self.otherwise.execute(ctx)


@dataclass
class Loop(Statement):
    FIRST = (Kind.WHILE,)
    condition: Condition
    body: StatementSequence

    @classmethod
    def parse(cls, ctx):
        ctx.expect(Kind.WHILE)
        condition = Condition.infer(ctx)
        ctx.expect(Kind.LOOP)
        body = StatementSequence.parse(ctx)
        ctx.expect(Kind.END)
        ctx.expect(Kind.SEMICOLON)
        return cls(condition, body)

    def display(self, indents=0):
        pad = Node.INDENT * indents
        return f"{pad}while {self.condition.display()} loop\n{self.body.display(indents + 1)}\n{pad}end;"

    def execute(self, ctx):
        # no iteration bound: a condition that never becomes false never returns
        while self.condition.evaluate(ctx):
            self.body.execute(ctx)


@dataclass
class Read(Statement):
    FIRST = (Kind.READ,)
    ids: IdList

    @classmethod
    def parse(cls, ctx):
        ctx.expect(Kind.READ)
        ids = IdList.parse(ctx)
        ctx.expect(Kind.SEMICOLON)
        return cls(ids)

    def display(self, indents=0):
        return f"{Node.INDENT * indents}read {self.ids.display()};"

    def execute(self, ctx):
        for name in self.ids.names:
            ctx.symbols.write(name, ctx.data.next_integer(name))


@dataclass
class Write(Statement):
    FIRST = (Kind.WRITE,)
    ids: IdList

    @classmethod
    def parse(cls, ctx):
        ctx.expect(Kind.WRITE)
        ids = IdList.parse(ctx)
        ctx.expect(Kind.SEMICOLON)
        return cls(ids)

    def display(self, indents=0):
        return f"{Node.INDENT * indents}write {self.ids.display()};"

    def execute(self, ctx):
        for name in self.ids.names:
            ctx.output.append(f"{name} = {ctx.symbols.read(name)}")


@dataclass
class Program(Node):
    declarations: DeclarationSequence
    statements: StatementSequence

    @classmethod
    def parse(cls, ctx):
        ctx.expect(Kind.PROGRAM)
        declarations = DeclarationSequence.parse(ctx)
        ctx.expect(Kind.BEGIN)
        statements = StatementSequence.parse(ctx)
        ctx.expect(Kind.END)
        if not ctx.at_end():
            ctx.expect(Kind.EOF)  # nothing may follow the program
        return cls(declarations, statements)

    def display(self, indents=0):
        pad = Node.INDENT * indents
        return "\n".join([
            f"{pad}program",
            self.declarations.display(indents + 1),
            f"{pad}begin",
            self.statements.display(indents + 1),
            f"{pad}end",
        ])

    def execute(self, ctx):
        self.statements.execute(ctx)

    @property
    def reads(self):
        """Whether or not the program contains a read statement anywhere."""

        def _reads(seq):
            for stmt in seq.statements:
                if isinstance(stmt, Read):
                    return True
                if isinstance(stmt, If) and (_reads(stmt.then) or (stmt.otherwise and _reads(stmt.otherwise))):
                    return True
                if isinstance(stmt, Loop) and _reads(stmt.body):
                    return True
            return False

        return _reads(self.statements)
