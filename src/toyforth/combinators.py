## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Operation, Context, Value
from .errors import ToyStackError
from .interpreter import evaluate_list


def comb_if(this: Operation, ctx: Context):
    """Takes a condition and a quotation from the stack, and evaluates the quotation on the same
    stack when the condition is true.  A condition given as a list is evaluated first, and the
    value it leaves on top of the stack becomes the condition.
    """
    stack = ctx.stack
    if stack.count() < 2:
        raise ToyStackError(f"`if` needs a condition and a quotation on the stack, but {stack.count()} available.", toy_op=this)
    if (top := stack.peek()).tag != Value.LIST:
        raise ToyStackError(f"`if` requires a quotation as list as top item on the stack, got {top.type_name}.", toy_op=this)

    then = stack.pop()
    cond = stack.pop()

    if cond.tag == Value.LIST:
        evaluate_list(ctx, cond)
        cond.deref()
        if stack.count() == 0:
            then.deref()
            raise ToyStackError("`if` condition left nothing on the stack.", toy_op=this)
        cond = stack.pop()

    if cond.tag != Value.BOOLEAN:
        raise ToyStackError(f"`if` condition must result in a Boolean, got {cond.type_name}.", toy_op=this)
    if cond.data:
        evaluate_list(ctx, then)

    cond.deref()
    then.deref()
