## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import inspect
from typing import Any, Callable, get_origin, get_args

from . import buffer
from .types import Value
from .errors import ToyTypeMissing


# Python annotations accepted on operators, and the value tags they require.
TYPE_TAGS: dict[Any, int | None] = {
    int: Value.INTEGER,
    bool: Value.BOOLEAN,
    str: Value.STRING,
    list: Value.LIST,
    Value: None,
    Any: None,
}


def _normalize_expected_type(tp, op_name: str):
    if get_origin(tp) is list: tp = list
    if tp not in TYPE_TAGS:
        raise ToyTypeMissing(f"Operation `{op_name}` uses unsupported annotation {tp!r}.")
    return tp


def get_stack_effects(*, fn: Callable, name: str = None) -> dict:
    """Parse the type annotations of a Python function to determine its stack effects.

    Arity is the number of values popped, bottom-most parameter first.  Valency is the
    number of values pushed back: 0 for `None`, 1 for a single type, or the length of
    a `tuple[...]` return annotation.
    """
    assert fn is not None, "Must specify the function to inspect."

    sig = inspect.signature(fn)
    params = list(sig.parameters.values())
    op_name = name or getattr(fn, '__name__', '<unnamed>')

    if any(p.kind not in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD) for p in params):
        raise ToyTypeMissing(f"Operation `{op_name}` may only take positional parameters.")

    ret_ann = sig.return_annotation
    if ret_ann is inspect.Signature.empty:
        raise ToyTypeMissing(f"Operation `{op_name}` must declare a return annotation.")

    missing_inputs = [p.name for p in params if p.annotation is inspect.Parameter.empty]
    if missing_inputs:
        raise ToyTypeMissing(f"Operation `{op_name}` must annotate parameters: {', '.join(missing_inputs)}.")

    returns_none = (ret_ann is type(None) or ret_ann is None)
    returns_tuple = (get_origin(ret_ann) is tuple)

    if returns_none:
        outputs: list = []
    else:
        raw_ret = get_args(ret_ann) if returns_tuple else (ret_ann,)
        outputs = [_normalize_expected_type(t, op_name) for t in raw_ret]

    return {
        'arity': len(params),
        'valency': len(outputs),
        'inputs': [_normalize_expected_type(p.annotation, op_name) for p in params],
        'outputs': outputs,
    }


def read_entire_file(filename: str, chunk_size: int = 1024) -> str:
    """Blocking read of the whole file, accumulated chunk by chunk into a byte buffer."""
    data = None
    with open(filename, 'rb') as fin:
        while chunk := fin.read(chunk_size):
            data = buffer.concat(data, chunk, factory=buffer.ByteBuffer)
    return data.to_bytes().decode('utf-8') if data is not None else ""
