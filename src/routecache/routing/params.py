"""Path parameter converters.

Each ``{name:type}`` placeholder in a route path compiles to a named
regex group; captured strings are converted back to ``type`` on match.
"""

from routecache.errors import ConfigurationError

# (regex_pattern, python_type) for each supported converter
CONVERTERS: dict[str, tuple[str, type]] = {
    "str": (r"[^/]+", str),
    "int": (r"\d+", int),
    "float": (r"\d+(?:\.\d+)?", float),
    "path": (r".+", str),
}


def param_group(param_name: str, param_type: str) -> str:
    """Return the named regex group matching one ``{name:type}`` placeholder.

    Raises ``ConfigurationError`` for converters that are not registered
    or names that cannot be used as a regex group name.
    """
    if param_type not in CONVERTERS:
        known = ", ".join(sorted(CONVERTERS))
        msg = f"Unknown converter {param_type!r} for parameter {param_name!r} (known: {known})"
        raise ConfigurationError(msg)
    if not param_name.isidentifier():
        msg = f"Parameter name {param_name!r} must be a valid identifier"
        raise ConfigurationError(msg)
    pattern, _ = CONVERTERS[param_type]
    return f"(?P<{param_name}>{pattern})"


def convert_param(value: str, param_type: str) -> str | int | float:
    """Convert a captured path parameter string to the target type.

    Raises ``ValueError`` if the string cannot be converted.
    Raises ``KeyError`` if *param_type* is not a registered converter.
    """
    _, target_type = CONVERTERS[param_type]
    return target_type(value)
