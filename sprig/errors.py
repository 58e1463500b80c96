class SprigError(Exception):
    """ Base class for all Sprig errors"""
    pass

class LexError(SprigError):
    """ Raised when the source text contains an illegal character"""

class ParseError(SprigError):
    """ Raised on unmatched or mismatched brackets, or a literal outside a call"""

class ConfigError(SprigError):
    """ Raised when a configuration value is not recognised"""

class EvalError(SprigError):
    """ Raised when evaluation halts on a dispatch error"""

class SprigTypeError(EvalError):
    """ Raised when an arithmetic builtin receives a non-numeric operand"""

class SprigArityError(EvalError):
    """ Raised when the number of arguments passed to a function is incorrect"""

class SprigDefinitionError(EvalError):
    """ Raised when a set/let form is malformed"""

class SprigNameError(EvalError):
    """ Raised when an operator is unknown and unknown operators are rejected"""

class SprigZeroDivisionError(EvalError):
    """ Raised when div is asked to divide by zero"""

class SprigOverflowError(EvalError):
    """ Raised when a numeric literal or result is out of representable range"""
