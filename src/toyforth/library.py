## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable
from dataclasses import dataclass

from .types import Operation, Context, Value, create_integer, create_boolean, create_string
from .errors import ToyNameError, ToyStackError
from .loader import get_stack_effects, TYPE_TAGS


@dataclass
class OperatorTable:
    functions: dict[str, Callable[..., Any]]
    combinators: dict[str, Callable[..., Any]]

    # Registration helpers
    def add_function(self, name: str, fn: Callable[..., Any]) -> None:
        fn, meta = _make_wrapper(fn, name)
        fn.__toy_meta__ = meta
        self.functions[name] = fn

    def add_combinator(self, name: str, fn: Callable[..., Any]) -> None:
        self.combinators[name] = fn

    def ensure_consistent(self) -> None:
        for _, fn in list(self.functions.items()):
            assert hasattr(fn, '__toy_meta__')
        assert not (self.functions.keys() & self.combinators.keys()), "Operator registered twice."

    def get_operation(self, name: str, *, meta: dict | None = None) -> Operation:
        """Resolve by exact name, never by prefix."""
        name = str(name)
        if (function := self.functions.get(name)) is not None:
            return Operation(Operation.FUNCTION, function, name, meta or {})
        if (combinator := self.combinators.get(name)) is not None:
            return Operation(Operation.COMBINATOR, combinator, name, meta or {})
        raise ToyNameError(f"Unrecognized symbol `{name}`.", toy_token=name, toy_meta=meta)

    @property
    def names(self) -> list[str]:
        """All operator names, longest first so the parser can match the longest prefix."""
        return sorted((*self.functions, *self.combinators), key=lambda n: (-len(n), n))


def _make_value(tp, result) -> Value:
    if tp is bool: return create_boolean(result)
    if tp is int: return create_integer(result)
    if tp is str: return create_string(result)
    assert isinstance(result, Value), f"Operation returned {type(result).__name__}, expected a value."
    return result


def _make_wrapper(fn: Callable[..., Any], name: str) -> Callable[..., Any]:
    """Turn a plain annotated function into an operation over the context's stack.

    Operands are popped (taking over the stack's ownership), type-checked against the
    annotations and unwrapped for `int`, `bool` and `str`.  Results are pushed, then every popped
    operand and every result that is not one of those operands is released once, so values
    that stay on the stack end up with the same count they had before the call.  An operation
    returning a new `Value` hands over the count it was created with.
    """
    meta = get_stack_effects(fn=fn, name=name)
    arity, inputs, outputs = meta['arity'], meta['inputs'], meta['outputs']

    def w_op(ctx: Context) -> None:
        stack = ctx.stack
        if (depth := stack.count()) < arity:
            raise ToyStackError(f"`{name}` needs at least {arity} item(s) on the stack, but {depth} available.",
                                toy_token=name)

        # Check types from top downward before anything is popped.
        for i, expected in enumerate(reversed(inputs)):
            if (tag := TYPE_TAGS[expected]) is None: continue
            if (actual := stack.peek(i)).tag != tag:
                raise ToyStackError(f"`{name}` expects {Value.TAG_NAMES[tag]} at position {i+1} from top, got {actual.type_name}.",
                                    toy_token=name)

        popped = [stack.pop() for _ in range(arity)]
        popped.reverse()
        args = [v.data if TYPE_TAGS[tp] in (Value.INTEGER, Value.BOOLEAN, Value.STRING) else v for v, tp in zip(popped, inputs)]
        args = [bool(a) if tp is bool else str(a) if tp is str else a for a, tp in zip(args, inputs)]

        result = fn(*args)
        results = () if not outputs else (result if len(outputs) > 1 or isinstance(result, tuple) else (result,))
        if len(results) != len(outputs):
            raise ToyStackError(f"`{name}` declared {len(outputs)} output(s) but returned {len(results)}.", toy_token=name)

        created = [_make_value(tp, res) for tp, res in zip(outputs, results)]
        for value in created:
            stack.append(value)
        # Results built by the operation carry its creation count; operands passed back do not.
        for value in created:
            if not any(value is p for p in popped):
                value.deref()
        for value in popped:
            value.deref()

    return w_op, meta
