"""Renders syntax trees as parenthesized prefix strings. Used by `plox --ast` and to compare parse trees in tests.

Format:
    (+ 1 (group 2))
    (var a 1)
    (fun add (a b) (return (+ a b)))
"""

from plox.grammar import nodes


def show(node):
    """Returns the prefix string of node, which may be an Expr, a Stmt or a list of Stmts."""
    if isinstance(node, list):
        return "\n".join(show(stmt) for stmt in node)
    if isinstance(node, nodes.Expr):
        return _show_expr(node)
    if isinstance(node, nodes.Stmt):
        return _show_stmt(node)
    raise TypeError(f"cannot show {type(node).__name__}")


def display(statements, indents=0):
    """Recursively displays statements in a readable, indented format. One line per statement; blocks, bodies and
    methods are nested one level deeper.
    """
    pad = "    " * indents
    result = []
    for stmt in statements:
        if isinstance(stmt, nodes.Block):
            result.append(f"{pad}(block")
            result.extend(display(stmt.statements, indents + 1))
            result[-1] += ")"
        elif isinstance(stmt, nodes.Function):
            params = " ".join(param.lexeme for param in stmt.params)
            result.append(f"{pad}(fun {stmt.name.lexeme} ({params})")
            result.extend(display(stmt.body, indents + 1))
            result[-1] += ")"
        elif isinstance(stmt, nodes.Class):
            header = f"{pad}(class {stmt.name.lexeme}"
            if stmt.superclass is not None:
                header += f" < {stmt.superclass.name.lexeme}"
            result.append(header)
            result.extend(display(stmt.methods, indents + 1))
            result[-1] += ")"
        else:
            result.append(pad + _show_stmt(stmt))
    return result


def literal(value):
    if value is None:
        return "nil"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, str):
        return f"\"{value}\""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parenthesize(name, *parts):
    rendered = [part if isinstance(part, str) else show(part) for part in parts if part is not None]
    return "(" + " ".join([name] + rendered) + ")"


def _show_expr(expr):
    if isinstance(expr, nodes.Literal):
        return literal(expr.value)
    if isinstance(expr, nodes.Grouping):
        return parenthesize("group", expr.expression)
    if isinstance(expr, nodes.Unary):
        return parenthesize(expr.operator.lexeme, expr.right)
    if isinstance(expr, (nodes.Binary, nodes.Logical)):
        return parenthesize(expr.operator.lexeme, expr.left, expr.right)
    if isinstance(expr, nodes.Variable):
        return expr.name.lexeme
    if isinstance(expr, nodes.Assign):
        return parenthesize("=", expr.name.lexeme, expr.value)
    if isinstance(expr, nodes.Call):
        return parenthesize("call", expr.callee, *expr.arguments)
    if isinstance(expr, nodes.Get):
        return parenthesize(".", expr.object, expr.name.lexeme)
    if isinstance(expr, nodes.Set):
        return parenthesize("=", expr.object, expr.name.lexeme, expr.value)
    if isinstance(expr, nodes.This):
        return "this"
    if isinstance(expr, nodes.Super):
        return parenthesize("super", expr.method.lexeme)
    raise TypeError(f"unhandled expression {type(expr).__name__}")


def _show_stmt(stmt):
    if isinstance(stmt, nodes.Expression):
        return parenthesize(";", stmt.expression)
    if isinstance(stmt, nodes.Print):
        return parenthesize("print", stmt.expression)
    if isinstance(stmt, nodes.Var):
        return parenthesize("var", stmt.name.lexeme, stmt.initializer)
    if isinstance(stmt, nodes.Block):
        return parenthesize("block", *stmt.statements)
    if isinstance(stmt, nodes.If):
        return parenthesize("if", stmt.condition, stmt.then_branch, stmt.else_branch)
    if isinstance(stmt, nodes.While):
        return parenthesize("while", stmt.condition, stmt.body)
    if isinstance(stmt, nodes.Function):
        params = "(" + " ".join(param.lexeme for param in stmt.params) + ")"
        return parenthesize("fun", stmt.name.lexeme, params, *stmt.body)
    if isinstance(stmt, nodes.Return):
        return parenthesize("return", stmt.value)
    if isinstance(stmt, nodes.Class):
        name = stmt.name.lexeme
        if stmt.superclass is not None:
            name += f" < {stmt.superclass.name.lexeme}"
        return parenthesize("class", name, *stmt.methods)
    raise TypeError(f"unhandled statement {type(stmt).__name__}")
