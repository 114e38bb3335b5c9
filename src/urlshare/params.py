"""urlshare.params
Parameter strings: the "key=value&key" text found in a URL's query or fragment.
"""

import dataclasses
import logging

from types import MappingProxyType
from typing import Final, Mapping, Self, TypeAlias
from urllib.parse import quote, unquote

from urlshare.errors import ConfigurationError, InvalidParameterError

logger = logging.getLogger(__name__)


class Absent:
    """Type of ABSENT, the value of a parameter written without "=" (e.g. "debug" in "?debug&page=2")."""

    _instance: "Absent | None" = None

    def __new__(cls) -> "Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self: Self) -> str:
        return "ABSENT"

    def __reduce__(self: Self) -> str:
        return "ABSENT"


ABSENT: Final[Absent] = Absent()

ParameterValue: TypeAlias = str | Absent
Parameters: TypeAlias = Mapping[str, ParameterValue]


@dataclasses.dataclass(frozen=True, slots=True)
class ParameterFormat:
    """How parameters are delimited and escaped within one URL component."""

    separator: str = "&"
    assignment: str = "="
    # Characters, beyond letters, digits and "-._~", left unescaped when encoding.
    safe: str = ""
    encoding: str = "utf-8"
    errors: str = "strict"

    def __post_init__(self: Self) -> None:
        if len(self.separator) == 0 or len(self.assignment) == 0:
            raise ConfigurationError("separator and assignment must be non-empty")
        if self.separator == self.assignment:
            raise ConfigurationError(f"separator and assignment are both {self.separator!r}")


DEFAULT_FORMAT: Final[ParameterFormat] = ParameterFormat()

_COMPONENT_DELIMITERS: tuple[str, ...] = ("?", "#")


def strip_component_delimiter(component: str) -> str:
    """Removes the leading "?" or "#" from a raw search or hash component.
    e.g. strip_component_delimiter("?page=2") == "page=2"
    """
    if component.startswith(_COMPONENT_DELIMITERS):
        return component[1:]
    return component


def _unquote(text: str, fmt: ParameterFormat) -> str:
    try:
        return unquote(text, encoding=fmt.encoding, errors=fmt.errors)
    except UnicodeDecodeError as exc:
        raise InvalidParameterError(f"cannot decode {text!r} as {fmt.encoding}") from exc


def decode_parameters(parameter_string: str, fmt: ParameterFormat = DEFAULT_FORMAT) -> Mapping[str, ParameterValue]:
    """Decodes a parameter string (without its leading "?" or "#") into an ordered, read-only mapping.

    Keys and values are percent-decoded; "+" is left alone. Only the first "=" of a token separates key from value.
    A token without "=" maps to ABSENT, and empty tokens (as left by "a=1&&b") map the key "" to ABSENT.
    When a key repeats, the last value wins and the key keeps the position of its first occurrence.
    """
    if parameter_string == "":
        return MappingProxyType({})

    parameters: dict[str, ParameterValue] = {}
    for token in parameter_string.split(fmt.separator):
        key, assignment, value = token.partition(fmt.assignment)
        parameters[_unquote(key, fmt)] = _unquote(value, fmt) if assignment else ABSENT

    logger.debug("decoded %r into %d parameters", parameter_string, len(parameters))
    return MappingProxyType(parameters)


def _quote(text: str, fmt: ParameterFormat) -> str:
    try:
        return quote(text, safe=fmt.safe, encoding=fmt.encoding, errors=fmt.errors)
    except UnicodeEncodeError as exc:
        raise InvalidParameterError(f"cannot encode {text!r} as {fmt.encoding}") from exc


def encode_parameters(parameters: Parameters, fmt: ParameterFormat = DEFAULT_FORMAT) -> str:
    """Encodes parameters into a parameter string, in iteration order. The result has no leading "?" or "#"."""
    tokens: list[str] = []
    for key, value in parameters.items():
        encoded_key: str = _quote(key, fmt)
        if isinstance(value, Absent):
            tokens.append(encoded_key)
        else:
            tokens.append(f"{encoded_key}{fmt.assignment}{_quote(value, fmt)}")
    return fmt.separator.join(tokens)
