"""
Switchyard validation: checks applied to a resolved command's invocation.

Order (fail fast, the first violation wins)
1. unknown options: every key except "_" must equal a declared option's name,
   short or long spelling; skipped when the command allows unknown options.
2. required options: every required option must hold a value under its
   canonical name (None counts as missing).
3. command validation: the callable returned by command.validate() receives the
   invocation; a string result is the failure message, True passes.

Failures are raised as faults (UnknownOptionError, MissingOptionError,
InvalidOptionsError); the cli renders them, prints the command help and exits.
"""
from .faults import FaultCode, InvalidOptionsError, MissingOptionError, UnknownOptionError


def validate(info, invocation, /):
    """
    Validate invocation against the command described by info.

    Raises
    - UnknownOptionError, MissingOptionError, InvalidOptionsError
    """
    command = info.command

    if not command.allow_unknown_options():
        for key in invocation:
            if key == "_":
                continue
            try:
                info.option(key)
            except KeyError:
                raise UnknownOptionError(
                    f"invalid option: {key!r}",
                    title="unknown option",
                    code=FaultCode.UNKNOWN_OPTION,
                    hint=f"run '{info.name} --help' to list the supported options",
                ) from None

    for option in info.options:
        if option.required and not invocation.defined(option.name):
            raise MissingOptionError(
                f"required option {option.name} not specified",
                title="missing option",
                code=FaultCode.MISSING_OPTION,
                hint=f"pass {option.flags} <{option.name}>",
            )

    if (validator := command.validate()) is not None:
        if isinstance(result := validator(invocation), str):
            raise InvalidOptionsError(
                result,
                title="invalid options",
                code=FaultCode.INVALID_OPTIONS,
            )


__all__ = (
    "validate",
)
