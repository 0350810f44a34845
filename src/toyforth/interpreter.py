## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Operation, Context, Value, create_list
from .errors import ToyError, ToyAssertionError
from .formatting import show_program_and_stack


def _token_meta(symbol: Value) -> dict:
    token = symbol.data
    return {'line': getattr(token, 'line', None), 'column': getattr(token, 'column', None)}


def evaluate_value(ctx: Context, value: Value) -> None:
    match value.tag:
        case Value.INTEGER | Value.BOOLEAN | Value.STRING | Value.LIST:
            ctx.stack.append(value)
        case Value.SYMBOL:
            op = ctx.table.get_operation(value.data, meta=_token_meta(value))
            try:
                match op.type:
                    case Operation.FUNCTION:
                        op.ptr(ctx)
                    case Operation.COMBINATOR:
                        op.ptr(op, ctx)
            except ToyError as exc:
                # Keep the innermost operation when `if` bodies fail.
                for attr, default in (('toy_op', op), ('toy_token', op.name), ('toy_meta', op.meta), ('toy_stack', ctx.stack)):
                    if getattr(exc, attr, None) is None:
                        setattr(exc, attr, default)
                raise
        case _:
            raise ToyAssertionError(f"Cannot evaluate value with invalid tag {value.tag}.")


def evaluate_list(ctx: Context, program: Value) -> None:
    """Evaluate each element in index order, holding a counted reference while it runs."""
    ctx.depth += 1
    try:
        for i in range(program.count()):
            value = program.get(i)
            if ctx.verbosity == 2 or (ctx.verbosity == 1 and (value.tag == Value.LIST or _is_combinator(ctx, value))):
                step = ctx.stats.get('steps', 0) if ctx.stats is not None else i
                print(f"\033[90m{step:>3}{'.' * (ctx.depth - 1):<3}:\033[0m  ", end='')
                show_program_and_stack(list(program.items())[i:], ctx.stack)
            if ctx.stats is not None:
                ctx.stats['steps'] = ctx.stats.get('steps', 0) + 1
            try:
                evaluate_value(ctx, value)
            finally:
                value.deref()
    finally:
        ctx.depth -= 1


def _is_combinator(ctx: Context, value: Value) -> bool:
    return value.tag == Value.SYMBOL and str(value.data) in ctx.table.combinators


def execute(program: Value, table=None, stack: Value | None = None, verbosity=0, stats=None) -> Value:
    """Run a compiled program against a fresh (or given) stack and return that stack."""
    if program.tag != Value.LIST:
        raise ToyAssertionError("Cannot execute something that is not a list of values.")
    if table is None:
        from .builtins import load_builtins_table
        table = load_builtins_table()

    ctx = Context(stack=create_list() if stack is None else stack, table=table, verbosity=verbosity, stats=stats)
    evaluate_list(ctx, program)

    if verbosity > 0:
        print(f"\033[90m{'end':>3}   :\033[0m  ", end='')
        show_program_and_stack([], ctx.stack)
    return ctx.stack
