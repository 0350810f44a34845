## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import lark


class ToyError(Exception):
    def __init__(self, message: str = "", *, toy_op=None, toy_token=None, toy_meta=None):
        """Base class for all toyforth-raised errors."""
        super().__init__(message)
        self.toy_op: object = toy_op
        self.toy_token: str = toy_token
        self.toy_meta: dict = toy_meta

class ToyParseError(ToyError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message, toy_token=token)
        self.filename = filename
        self.line = line
        self.column = column
        self.token = token

class ToyMalformedToken(ToyParseError):
    """A single token that could not be terminated; the parser reports it and skips ahead."""
    pass

class ToyIncompleteParse(ToyParseError, lark.exceptions.ParseError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message, filename=filename, line=line, column=column, token=token)

class ToyNameError(ToyError, NameError):
    pass

class ToyAssertionError(ToyError, AssertionError):
    pass

class ToyZeroDivision(ToyError, ZeroDivisionError):
    pass

class ToyTypeMissing(ToyError, TypeError):
    pass


class ToyStackError(ToyError, TypeError):
    """Runtime type exceptions found by checking the stack and its content."""
    def __init__(self, message: str = "", *, toy_op=None, toy_token=None, toy_meta=None, toy_stack=None):
        super().__init__(message, toy_op=toy_op, toy_token=toy_token, toy_meta=toy_meta)
        self.toy_stack = toy_stack
