"""Abstract syntax tree for plox. Nodes are passive data carriers: they are created once by the parser and never
mutated afterward. Each pass (resolver, interpreter, printer) dispatches on the node class.

Nodes compare and hash by identity, which lets the resolver key its binding table on the node itself instead of
storing anything in the tree:

```
<expr> ::= Literal | Grouping | Unary | Binary | Logical | Variable | Assign | Call | Get | Set | This | Super
<stmt> ::= Expression | Print | Var | Block | If | While | Function | Return | Class
```
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, eq=False)
class Expr:
    """Superclass of all expression nodes."""


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    value: object


@dataclass(frozen=True, eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Unary(Expr):
    operator: object
    right: Expr


@dataclass(frozen=True, eq=False)
class Binary(Expr):
    left: Expr
    operator: object
    right: Expr


@dataclass(frozen=True, eq=False)
class Logical(Expr):
    left: Expr
    operator: object
    right: Expr


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: object


@dataclass(frozen=True, eq=False)
class Assign(Expr):
    name: object
    value: Expr


@dataclass(frozen=True, eq=False)
class Call(Expr):
    callee: Expr
    paren: object  # closing paren, used as the error location
    arguments: list = field(default_factory=list)


@dataclass(frozen=True, eq=False)
class Get(Expr):
    object: Expr
    name: object


@dataclass(frozen=True, eq=False)
class Set(Expr):
    object: Expr
    name: object
    value: Expr


@dataclass(frozen=True, eq=False)
class This(Expr):
    keyword: object


@dataclass(frozen=True, eq=False)
class Super(Expr):
    keyword: object
    method: object


@dataclass(frozen=True, eq=False)
class Stmt:
    """Superclass of all statement nodes."""


@dataclass(frozen=True, eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Var(Stmt):
    name: object
    initializer: Expr = None


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    statements: list = field(default_factory=list)


@dataclass(frozen=True, eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Stmt = None


@dataclass(frozen=True, eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True, eq=False)
class Function(Stmt):
    name: object
    params: list
    body: list


@dataclass(frozen=True, eq=False)
class Return(Stmt):
    keyword: object
    value: Expr = None


@dataclass(frozen=True, eq=False)
class Class(Stmt):
    name: object
    superclass: Variable = None
    methods: list = field(default_factory=list)
