"""urlshare.nurl
Absolute URL parsing and serialization for parameter rewriting.
Follows the URI grammar of RFC 3986 and the IRI grammar of RFC 3987.
"""

import dataclasses
import logging
import re

from typing import Any, Iterable, Self
from urllib.parse import quote

from urlshare.errors import InvalidUrlError

logger = logging.getLogger(__name__)

# Each of these ABNF rules is from RFC 3986, 3987, 6874, or 5234.

# ALPHA = %x41-5A / %x61-7A
_ALPHA: str = r"[A-Za-z]"

# DIGIT = %x30-39
_DIGIT: str = r"[0-9]"

# HEXDIG = DIGIT / "A" / "B" / "C" / "D" / "E" / "F"
_HEXDIG: str = rf"(?:{_DIGIT}|[A-Fa-f])"


def _char_class(*ranges: tuple[int, int]) -> str:
    """Builds a regex character class out of inclusive code point ranges."""
    return "[" + "".join(f"{chr(low)}-{chr(high)}" for low, high in ranges) + "]"


# ucschar = %xA0-D7FF / %xF900-FDCF / %xFDF0-FFEF
#         / %x10000-1FFFD / %x20000-2FFFD / %x30000-3FFFD
#         / ...
#         / %xD0000-DFFFD / %xE1000-EFFFD
_UCSCHAR: str = _char_class(
    (0xA0, 0xD7FF),
    (0xF900, 0xFDCF),
    (0xFDF0, 0xFFEF),
    *((plane << 16, (plane << 16) | 0xFFFD) for plane in range(0x1, 0xE)),
    (0xE1000, 0xEFFFD),
)

# iprivate = %xE000-F8FF / %xF0000-FFFFD / %x100000-10FFFD
_IPRIVATE: str = _char_class((0xE000, 0xF8FF), (0xF0000, 0xFFFFD), (0x100000, 0x10FFFD))

# pct-encoded = "%" HEXDIG HEXDIG
_PCT_ENCODED: str = rf"%{_HEXDIG}{_HEXDIG}"

# sub-delims = "!" / "$" / "&" / "'" / "(" / ")" / "*" / "+" / "," / ";" / "="
_SUB_DELIMS: str = r"[!$&'()*+,;=]"

# scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
_SCHEME: str = rf"(?P<scheme>{_ALPHA}(?:{_ALPHA}|{_DIGIT}|[+\-.])*)"

# port = *DIGIT
_PORT: str = rf"(?P<port>{_DIGIT}*)"

# dec-octet = DIGIT / %x31-39 DIGIT / "1" 2DIGIT / "2" %x30-34 DIGIT / "25" %x30-35
_DEC_OCTET: str = rf"(?:{_DIGIT}|[1-9]{_DIGIT}|1{_DIGIT}{{2}}|2[0-4]{_DIGIT}|25[0-5])"

# IPv4address = dec-octet "." dec-octet "." dec-octet "." dec-octet
_IPV4ADDRESS: str = rf"{_DEC_OCTET}\.{_DEC_OCTET}\.{_DEC_OCTET}\.{_DEC_OCTET}"

# h16 = 1*4HEXDIG
_H16: str = rf"(?:{_HEXDIG}{{1,4}})"

# ls32 = ( h16 ":" h16 ) / IPv4address
_LS32: str = rf"(?:{_H16}:{_H16}|{_IPV4ADDRESS})"


def _elided(before: int) -> str:
    """[ *before( h16 ":" ) h16 ] "::" """
    return rf"(?:(?:{_H16}:){{0,{before}}}{_H16})?::"


# IPv6address =                            6( h16 ":" ) ls32
#             /                       "::" 5( h16 ":" ) ls32
#             / [               h16 ] "::" 4( h16 ":" ) ls32
#             / [ *1( h16 ":" ) h16 ] "::" 3( h16 ":" ) ls32
#             / [ *2( h16 ":" ) h16 ] "::" 2( h16 ":" ) ls32
#             / [ *3( h16 ":" ) h16 ] "::"    h16 ":"   ls32
#             / [ *4( h16 ":" ) h16 ] "::"              ls32
#             / [ *5( h16 ":" ) h16 ] "::"              h16
#             / [ *6( h16 ":" ) h16 ] "::"
_IPV6ADDRESS: str = (
    "(?:"
    + "|".join(
        (
            rf"(?:{_H16}:){{6}}{_LS32}",
            rf"::(?:{_H16}:){{5}}{_LS32}",
            rf"{_elided(0)}(?:{_H16}:){{4}}{_LS32}",
            rf"{_elided(1)}(?:{_H16}:){{3}}{_LS32}",
            rf"{_elided(2)}(?:{_H16}:){{2}}{_LS32}",
            rf"{_elided(3)}{_H16}:{_LS32}",
            rf"{_elided(4)}{_LS32}",
            rf"{_elided(5)}{_H16}",
            _elided(6),
        )
    )
    + ")"
)

# ZoneID = 1*( unreserved / pct-encoded )
_ZONEID: str = rf"(?:{_ALPHA}|{_DIGIT}|[-._~]|{_PCT_ENCODED})+"

# IPvFuture = "v" 1*HEXDIG "." 1*( unreserved / sub-delims / ":" )
_IPVFUTURE: str = rf"v{_HEXDIG}+\.(?:{_ALPHA}|{_DIGIT}|[-._~]|{_SUB_DELIMS}|:)+"


def _absolute_pattern(international: bool) -> re.Pattern[str]:
    """Compiles the URI rule (RFC 3986 section 3), or the IRI rule (RFC 3987 section 2.2) when international is set.
    The two grammars differ only in which characters count as unreserved, iprivate in the query, and zone IDs.
    """
    # unreserved = ALPHA / DIGIT / "-" / "." / "_" / "~"
    # iunreserved = unreserved / ucschar
    unreserved: str = rf"(?:{_ALPHA}|{_DIGIT}|[-._~]|{_UCSCHAR})" if international else rf"(?:{_ALPHA}|{_DIGIT}|[-._~])"

    # pchar = unreserved / pct-encoded / sub-delims / ":" / "@"
    pchar: str = rf"(?:{unreserved}|{_PCT_ENCODED}|{_SUB_DELIMS}|[:@])"

    # query = *( pchar / "/" / "?" )
    # iquery = *( ipchar / iprivate / "/" / "?" )
    query_char: str = rf"{pchar}|{_IPRIVATE}|[/?]" if international else rf"{pchar}|[/?]"
    query: str = rf"(?P<query>(?:{query_char})*)"

    # fragment = *( pchar / "/" / "?" )
    fragment: str = rf"(?P<fragment>(?:{pchar}|[/?])*)"

    # segment = *pchar, segment-nz = 1*pchar
    segment: str = rf"{pchar}*"
    segment_nz: str = rf"{pchar}+"

    # path-abempty = *( "/" segment )
    # path-absolute = "/" [ segment-nz *( "/" segment ) ]
    # path-rootless = segment-nz *( "/" segment )
    # path-empty = 0<pchar>
    path_abempty: str = rf"(?P<path_abempty>(?:/{segment})*)"
    path_absolute: str = rf"(?P<path_absolute>/(?:{segment_nz}(?:/{segment})*)?)"
    path_rootless: str = rf"(?P<path_rootless>{segment_nz}(?:/{segment})*)"
    path_empty: str = r"(?P<path_empty>)"

    # userinfo = *( unreserved / pct-encoded / sub-delims / ":" )
    userinfo: str = rf"(?P<userinfo>(?:{unreserved}|{_PCT_ENCODED}|{_SUB_DELIMS}|:)*)"

    # IP-literal = "[" ( IPv6address / IPv6addrz / IPvFuture  ) "]"
    # (IRIs don't support zoneinfo)
    ipv6addrz: str = "" if international else rf"|{_IPV6ADDRESS}%25{_ZONEID}"
    ip_literal: str = rf"\[(?:{_IPV6ADDRESS}{ipv6addrz}|{_IPVFUTURE})\]"

    # reg-name = *( unreserved / pct-encoded / sub-delims )
    reg_name: str = rf"(?:{unreserved}|{_PCT_ENCODED}|{_SUB_DELIMS})*"

    # host = IP-literal / IPv4address / reg-name
    host: str = rf"(?P<host>{ip_literal}|{_IPV4ADDRESS}|{reg_name})"

    # authority = [ userinfo "@" ] host [ ":" port ]
    authority: str = rf"(?:{userinfo}@)?{host}(?::{_PORT})?"

    # hier-part = "//" authority path-abempty / path-absolute / path-rootless / path-empty
    hier_part: str = rf"(?://{authority}{path_abempty}|{path_absolute}|{path_rootless}|{path_empty})"

    # URI = scheme ":" hier-part [ "?" query ] [ "#" fragment ]
    return re.compile(rf"\A{_SCHEME}:{hier_part}(?:\?{query})?(?:#{fragment})?\Z")


_URI_PAT: re.Pattern[str] = _absolute_pattern(international=False)
_IRI_PAT: re.Pattern[str] = _absolute_pattern(international=True)

_PATH_KINDS: tuple[str, ...] = ("path_abempty", "path_absolute", "path_empty", "path_rootless")

# Schemes whose empty path is serialized as "/", as browsers do.
SPECIAL_SCHEMES: frozenset[str] = frozenset(("ftp", "file", "http", "https", "ws", "wss"))


@dataclasses.dataclass(frozen=True)
class NURL:
    """An absolute URL split into its raw components. Use one of the parse_* functions to get one."""

    raw_scheme: str | None
    raw_userinfo: str | None
    raw_host: str | None
    raw_port: str | None
    raw_path: str
    raw_query: str | None
    raw_fragment: str | None

    @property
    def scheme(self: Self) -> str | None:
        return self.raw_scheme

    @property
    def userinfo(self: Self) -> str | None:
        return self.raw_userinfo

    @property
    def host(self: Self) -> str | None:
        return self.raw_host

    @property
    def port(self: Self) -> int | None:
        if self.raw_port is not None and len(self.raw_port) > 0:
            return int(self.raw_port, base=10)
        return None

    @property
    def path(self: Self) -> str:
        return self.raw_path

    @property
    def query(self: Self) -> str | None:
        return self.raw_query

    @property
    def fragment(self: Self) -> str | None:
        return self.raw_fragment

    @property
    def search(self: Self) -> str:
        """The query with its leading "?", or "" when there is no query or it is empty."""
        return f"?{self.raw_query}" if self.raw_query else ""

    @property
    def hash(self: Self) -> str:
        """The fragment with its leading "#", or "" when there is no fragment or it is empty."""
        return f"#{self.raw_fragment}" if self.raw_fragment else ""

    @property
    def authority(self: Self) -> str | None:
        """userinfo@host:port"""
        if self.raw_host is None:
            return None
        result: str = ""
        if self.raw_userinfo is not None:
            result += f"{self.raw_userinfo}@"
        result += self.raw_host
        if self.raw_port is not None:
            result += f":{self.raw_port}"
        return result

    def serialize(self: Self) -> str:
        """Direct translation of RFC 3986 section 5.3"""
        result: str = ""
        if self.raw_scheme is not None:
            result += f"{self.raw_scheme}:"
        if self.authority is not None:
            result += f"//{self.authority}"
        result += self.raw_path
        if self.raw_query is not None:
            result += f"?{self.raw_query}"
        if self.raw_fragment is not None:
            result += f"#{self.raw_fragment}"
        return result

    def replace(self: Self, **changes: Any) -> Self:
        """Returns a copy with the given raw_* components swapped in."""
        return dataclasses.replace(self, **changes)

    def __str__(self: Self) -> str:
        return self.serialize()


def _capitalize_percent_encodings(string: str) -> str:
    """Returns string with all percent-encoded sequences expressed in capital letters.
    e.g. _capitalize_percent_encodings("example%2ecom") == "example%2Ecom"
    """
    return re.sub(_PCT_ENCODED, lambda m: m[0].upper(), string)


def _parse(data: str, pattern: re.Pattern[str], path_kinds: Iterable[str]) -> NURL:
    m: re.Match[str] | None = pattern.match(data)
    if m is None:
        raise InvalidUrlError(data)

    scheme: str = m["scheme"].lower()

    userinfo: str | None = m["userinfo"]
    if userinfo is not None:
        userinfo = _capitalize_percent_encodings(userinfo)

    host: str | None = m["host"]
    if host is not None:
        if host.isascii():
            host = host.lower()
        host = _capitalize_percent_encodings(host)

    port: str | None = m["port"]
    if port:
        # Get rid of leading 0s.
        port = str(int(port))

    query: str | None = m["query"]
    if query is not None:
        query = _capitalize_percent_encodings(query)

    fragment: str | None = m["fragment"]
    if fragment is not None:
        fragment = _capitalize_percent_encodings(fragment)

    return NURL(
        raw_scheme=scheme,
        raw_userinfo=userinfo,
        raw_host=host,
        raw_port=port,
        raw_path=_capitalize_percent_encodings(m[next(pk for pk in path_kinds if m[pk] is not None)]),
        raw_query=query,
        raw_fragment=fragment,
    )


def parse_uri(data: str) -> NURL:
    """RFC 3986-compliant absolute URI parser.
    If you want to parse a URL that contains only ASCII characters (e.g. "http://example.org/path?query#fragment"), this is the function to use.
    """
    return _parse(data, _URI_PAT, _PATH_KINDS)


def parse_iri(data: str) -> NURL:
    """RFC 3987-compliant absolute IRI parser.
    If you want to parse a URL that contains non-ASCII characters (e.g. "https://en.wiktionary.org/wiki/Ῥόδος?query#fragment"), this is the function to use.
    """
    return _parse(data, _IRI_PAT, _PATH_KINDS)


# C0 controls and space, trimmed from both ends of user input.
_C0_CONTROL_OR_SPACE: str = "".join(map(chr, range(0x21)))

# ASCII characters a query or fragment may not hold literally, and "%" not starting a pct-encoded triplet.
_UNESCAPED_COMPONENT_CHAR: re.Pattern[str] = re.compile(r"""%(?![0-9A-Fa-f]{2})|[\x00-\x20"#<>\[\\\]^`{|}\x7f]""")


def _escape_component(component: str) -> str:
    """Percent-encodes what the query and fragment rules reject, as browsers do.
    e.g. _escape_component("filter[name]=50%") == "filter%5Bname%5D=50%25"
    """
    return _UNESCAPED_COMPONENT_CHAR.sub(lambda m: quote(m[0], safe=""), component)


def parse_url(data: str) -> NURL:
    """Parses user-supplied text as an absolute URL.

    Tabs and newlines are removed wherever they occur and surrounding whitespace is trimmed before parsing.
    Characters the query and fragment rules reject (space, quotes, brackets, "|", a stray "%", ...) are percent-encoded.
    ASCII input goes through parse_uri, anything else through parse_iri.
    An empty path on a special scheme with an authority becomes "/".
    Raises InvalidUrlError if the text is not an absolute URL.
    """
    data = re.sub(r"[\r\n\t]", "", data).strip(_C0_CONTROL_OR_SPACE)

    head, hash_mark, fragment = data.partition("#")
    head, question_mark, query = head.partition("?")
    data = f"{head}{question_mark}{_escape_component(query)}{hash_mark}{_escape_component(fragment)}"

    result: NURL = parse_uri(data) if data.isascii() else parse_iri(data)
    if result.raw_scheme in SPECIAL_SCHEMES and result.raw_host is not None and len(result.raw_path) == 0:
        result = result.replace(raw_path="/")

    logger.debug(
        "parsed %r: scheme=%r authority=%r path=%r query=%r fragment=%r",
        data,
        result.raw_scheme,
        result.authority,
        result.raw_path,
        result.raw_query,
        result.raw_fragment,
    )
    return result
