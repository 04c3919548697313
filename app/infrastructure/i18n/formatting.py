"""printf-style message formatting.

Messages that are not templates are rendered by substituting positional
arguments into verbs such as ``%s``, ``%d`` or ``%.2f``. In addition to the
usual verbs, ``%v`` renders any value, ``%q`` a quoted string, ``%t`` a
boolean, ``%b`` a binary integer and ``%T`` the type name of the argument,
which is handy for diagnostic messages.
"""

import json
import re
from typing import Any, Sequence

VERB_PATTERN = re.compile(
    r"%(?P<flags>[-+ #0]*)(?P<width>\d+)?(?:\.(?P<precision>\d+))?(?P<verb>[a-zA-Z%])"
)

_NUMERIC_VERBS = set("diouxXeEfFgGc")


def _format_value(verb: str, spec: str, value: Any) -> str:
    if verb in _NUMERIC_VERBS:
        return f"%{spec}{verb}" % (value,)
    if verb in ("s", "v"):
        text = value.decode("utf-8") if isinstance(value, bytes) else str(value)
        return f"%{spec}s" % (text,)
    if verb == "q":
        return f"%{spec}s" % (json.dumps(str(value), ensure_ascii=False),)
    if verb == "t":
        return f"%{spec}s" % (str(bool(value)).lower(),)
    if verb == "b":
        return f"%{spec}s" % (format(int(value), "b"),)
    if verb == "T":
        return f"%{spec}s" % (type(value).__name__,)
    raise ValueError(f"unsupported verb %{verb}")


def sprintf(message: str, args: Sequence[Any] = ()) -> str:
    """Format ``message`` with positional ``args``.

    Never raises: a verb without a matching argument is left as written,
    surplus arguments are ignored and a value that does not fit its verb is
    rendered with ``str()``.

    Args:
        message: printf-style format string.
        args: Positional arguments, consumed left to right.

    Returns:
        Formatted message.
    """
    remaining = list(args)

    def replace(match: re.Match) -> str:
        verb = match.group("verb")
        if verb == "%":
            return "%"
        if not remaining:
            return match.group(0)

        value = remaining.pop(0)
        spec = match.group("flags") + (match.group("width") or "")
        if match.group("precision") is not None:
            spec += "." + match.group("precision")

        try:
            return _format_value(verb, spec, value)
        except (TypeError, ValueError, OverflowError):
            return str(value)

    return VERB_PATTERN.sub(replace, message)
