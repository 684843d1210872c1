# mini_json.py
# Combinator-built recursive-descent parser for a reduced JSON grammar
#
# =============================================================================
#  PARSER IMPLEMENTATION: SCANNERLESS COMBINATORS
# =============================================================================
#
# There is no separate lexer. Every grammar rule is a recognizer: a callable
# taking an immutable Input cursor (text, position, nesting depth, options)
# and returning (Input-after-match, result). Failure is signalled by raising,
# and since the caller still holds its own cursor nothing is ever partially
# consumed.
#
# Grammar (reduced; no signs, fractions, exponents or string escapes):
#
#   document := ws* value ws* EOF
#   value    := null | bool | number | string | array | object
#   null     := "null"
#   bool     := "true" | "false"
#   number   := [0-9]+                      (at most 2**64 - 1)
#   string   := '"' [^"]* '"'               (payload kept verbatim)
#   array    := ws* "[" ws* (value (ws* "," ws* value)*)? ws* "]" ws*
#   object   := ws* "{" ws* (member (ws* "," ws* member)*)? ws* "}" ws*
#   member   := string ws* ":" ws* value
#
# Failure kinds:
# 1. NoMatch   - lead token absent. Local control flow for alt().
# 2. Malformed - lead token matched but the body is wrong. Never retried.
# 3. TrailingData - a complete value was read but input remains.
#
# Object keys may repeat; members are kept as an ordered list of pairs.
# Nesting depth is capped (DEPTH_LIMIT_DEFAULT). Input nested deeper than
# the interpreter stack allows fails as Malformed whatever the cap is.
# =============================================================================

import argparse
import logging
import sys
from pprint import pformat
from typing import Any, Callable, List, NamedTuple, Optional, Sequence, Tuple

from json_value import Array, Bool, Null, Number, Object, String, Value, render

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
DEPTH_LIMIT_DEFAULT = 64           # max nested arrays/objects per document
NUMBER_MAX          = 2 ** 64 - 1  # numbers are unsigned 64-bit
WHITESPACE          = " \t\n\r"
DIGITS              = "0123456789"

_NUMBER_MAX_DIGITS = len(str(NUMBER_MAX))

# ---------------------------------------------------------------------------
# ERRORS
# ---------------------------------------------------------------------------
class ParseError(SyntaxError):
    """
    Base of every parse failure.

    `pos` is the absolute character offset of the failure and `expected`
    names the constructs that would have been accepted there (may be empty).
    """
    def __init__(self, message: str, pos: int, expected: Sequence[str] = ()):
        super().__init__(message)
        self.pos = pos
        self.expected = tuple(expected)

    def location(self, text: str) -> Tuple[int, int]:
        """1-based (line, column) of `pos` within `text`."""
        line = text.count("\n", 0, self.pos) + 1
        column = self.pos - text.rfind("\n", 0, self.pos)
        return line, column


class NoMatch(ParseError):
    pass


class Malformed(ParseError):
    pass


class TrailingData(ParseError):
    pass


def _one_of(names: Sequence[str]) -> str:
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " or " + names[-1]


def _no_match(expected: Sequence[str], pos: int) -> NoMatch:
    return NoMatch(f"expected {_one_of(expected)} at offset {pos}", pos, expected)


def _committed(exc: NoMatch) -> Malformed:
    return Malformed(str(exc), exc.pos, exc.expected)

# ---------------------------------------------------------------------------
# INPUT CURSOR
# ---------------------------------------------------------------------------
class Options(NamedTuple):
    max_depth: int = DEPTH_LIMIT_DEFAULT
    reject_duplicate_keys: bool = False


class Input(NamedTuple):
    text: str
    pos: int = 0
    depth: int = 0
    options: Options = Options()

    def advance(self, count: int) -> "Input":
        return self._replace(pos=self.pos + count)

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.text)


Recognizer = Callable[[Input], Tuple[Input, Any]]

# ---------------------------------------------------------------------------
# COMBINATORS
# ---------------------------------------------------------------------------
def tag(literal: str) -> Recognizer:
    """Match `literal` exactly."""
    expected = (repr(literal),)

    def recognize(inp: Input) -> Tuple[Input, str]:
        if inp.text.startswith(literal, inp.pos):
            return inp.advance(len(literal)), literal
        raise _no_match(expected, inp.pos)
    return recognize


def digit1(inp: Input) -> Tuple[Input, str]:
    text, end = inp.text, inp.pos
    while end < len(text) and text[end] in DIGITS:
        end += 1
    if end == inp.pos:
        raise _no_match(("digit",), inp.pos)
    return inp._replace(pos=end), text[inp.pos:end]


def multispace0(inp: Input) -> Tuple[Input, str]:
    text, end = inp.text, inp.pos
    while end < len(text) and text[end] in WHITESPACE:
        end += 1
    return inp._replace(pos=end), text[inp.pos:end]


def map_(inner: Recognizer, fn: Callable[[Any], Any]) -> Recognizer:
    def recognize(inp: Input):
        rest, out = inner(inp)
        return rest, fn(out)
    return recognize


def ws(inner: Recognizer) -> Recognizer:
    """Skip whitespace on both sides of `inner`."""
    def recognize(inp: Input):
        inp, _ = multispace0(inp)
        inp, out = inner(inp)
        inp, _ = multispace0(inp)
        return inp, out
    return recognize


def alt(*alternatives: Recognizer) -> Recognizer:
    """
    Ordered choice. The first alternative that matches wins; Malformed from
    any alternative propagates at once. When every alternative reports
    NoMatch, one NoMatch is raised at the furthest offset reached, listing
    everything expected there.
    """
    def recognize(inp: Input):
        failures: List[NoMatch] = []
        for alternative in alternatives:
            try:
                return alternative(inp)
            except NoMatch as exc:
                failures.append(exc)
        raise _deepest(failures)
    return recognize


def _deepest(failures: Sequence[NoMatch]) -> NoMatch:
    pos = max(f.pos for f in failures)
    expected: List[str] = []
    for f in failures:
        if f.pos != pos:
            continue
        for name in f.expected:
            if name not in expected:
                expected.append(name)
    return _no_match(expected, pos)


def cut(inner: Recognizer) -> Recognizer:
    """NoMatch from `inner` becomes Malformed."""
    def recognize(inp: Input):
        try:
            return inner(inp)
        except NoMatch as exc:
            raise _committed(exc) from None
    return recognize


def delimited(opening: Recognizer, inner: Recognizer, closing: Recognizer) -> Recognizer:
    """
    opening, inner, closing; only inner's result is kept. Once `opening`
    has matched, the rest is committed.

    A RecursionError below this point becomes Malformed at the opening's
    offset; a handler that itself runs out of stack re-raises to the next
    enclosing container, which reports instead.
    """
    body = cut(inner)
    tail = cut(closing)

    def recognize(inp: Input):
        start = inp.pos
        inp, _ = opening(inp)
        try:
            inp, out = body(inp)
            inp, _ = tail(inp)
        except RecursionError:
            raise Malformed(f"depth limit exceeded at offset {start}", start) from None
        return inp, out
    return recognize


def sequence(first: Recognizer, *rest: Recognizer) -> Recognizer:
    """Run recognizers in order; `first` decides, the others are committed."""
    committed = [cut(recognizer) for recognizer in rest]

    def recognize(inp: Input):
        inp, head = first(inp)
        results = [head]
        for recognizer in committed:
            inp, out = recognizer(inp)
            results.append(out)
        return inp, tuple(results)
    return recognize


def separated_list0(separator: Recognizer, element: Recognizer) -> Recognizer:
    """
    Zero or more `element`s with `separator` strictly between them. A
    separator must be followed by an element, so a trailing separator is
    Malformed.
    """
    committed = cut(element)

    def recognize(inp: Input):
        items: List[Any] = []
        try:
            inp, item = element(inp)
        except NoMatch:
            return inp, items
        items.append(item)
        while True:
            try:
                after, _ = separator(inp)
            except NoMatch:
                return inp, items
            inp, item = committed(after)
            items.append(item)
    return recognize


def enter(opening: Recognizer) -> Recognizer:
    """Match a container's opening token and go one nesting level down."""
    def recognize(inp: Input):
        rest, out = opening(inp)
        if rest.depth >= rest.options.max_depth:
            raise Malformed(f"depth limit exceeded at offset {inp.pos}", inp.pos)
        return rest._replace(depth=rest.depth + 1), out
    return recognize


def leave(closing: Recognizer) -> Recognizer:
    def recognize(inp: Input):
        rest, out = closing(inp)
        return rest._replace(depth=rest.depth - 1), out
    return recognize

# ---------------------------------------------------------------------------
# PRIMITIVE RECOGNIZERS
# ---------------------------------------------------------------------------
json_null = map_(tag("null"), lambda _: Null())

json_bool = alt(
    map_(tag("true"), lambda _: Bool(True)),
    map_(tag("false"), lambda _: Bool(False)),
)


def json_number(inp: Input) -> Tuple[Input, Number]:
    rest, digits = digit1(inp)
    # Length check first: int() refuses very long digit strings outright.
    significant = digits.lstrip("0") or "0"
    if len(significant) > _NUMBER_MAX_DIGITS or int(significant) > NUMBER_MAX:
        raise Malformed(f"number too large at offset {inp.pos}", inp.pos)
    return rest, Number(int(significant))


def string_literal(inp: Input) -> Tuple[Input, str]:
    text, start = inp.text, inp.pos
    if not text.startswith('"', start):
        raise _no_match(("string",), start)
    end = text.find('"', start + 1)
    if end < 0:
        raise Malformed(f"unterminated string starting at offset {start}", start, ("'\"'",))
    return inp._replace(pos=end + 1), text[start + 1:end]


json_string = map_(string_literal, String)

# ---------------------------------------------------------------------------
# COMPOSITE RECOGNIZERS
# ---------------------------------------------------------------------------
def json_value(inp: Input) -> Tuple[Input, Value]:
    """
    Value dispatcher: null, bool, number, string, array, object, tried in
    that order. Defined as a function so the containers below can refer to
    it before the alternatives exist.
    """
    return _dispatch(inp)


json_array = map_(
    delimited(
        enter(ws(tag("["))),
        separated_list0(ws(tag(",")), json_value),
        leave(ws(tag("]"))),
    ),
    lambda items: Array(tuple(items)),
)


def _located(inner: Recognizer) -> Recognizer:
    """Pair `inner`'s result with the offset it matched at."""
    def recognize(inp: Input):
        rest, out = inner(inp)
        return rest, (inp.pos, out)
    return recognize


def _unique_keys(inner: Recognizer) -> Recognizer:
    """Reject a repeated key at its own offset when the options ask for it."""
    def recognize(inp: Input):
        rest, members = inner(inp)
        if inp.options.reject_duplicate_keys:
            seen = set()
            for (pos, key), _, _ in members:
                if key in seen:
                    raise Malformed(f"duplicate key {key!r} at offset {pos}", pos)
                seen.add(key)
        return rest, members
    return recognize


json_object = map_(
    _unique_keys(delimited(
        enter(ws(tag("{"))),
        separated_list0(
            ws(tag(",")),
            sequence(_located(string_literal), ws(tag(":")), json_value),
        ),
        leave(ws(tag("}"))),
    )),
    lambda members: Object(tuple((key, value) for (_, key), _, value in members)),
)

_dispatch = alt(json_null, json_bool, json_number, json_string, json_array, json_object)

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def document(inp: Input) -> Tuple[Input, Value]:
    """Exactly one value, optionally surrounded by whitespace, then EOF."""
    inp, _ = multispace0(inp)
    inp, value = json_value(inp)
    inp, _ = multispace0(inp)
    if not inp.at_end:
        raise TrailingData(f"trailing data after root value at offset {inp.pos}", inp.pos)
    return inp, value


def parse(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT,
          reject_duplicate_keys: bool = False) -> Value:
    """
    Parse a complete document into its Value tree.

    Raises NoMatch, Malformed or TrailingData (all ParseError, itself a
    SyntaxError). There is no partial result.
    """
    log.debug("parsing %d characters (max_depth=%d)", len(text), max_depth)
    inp = Input(text, options=Options(max_depth, reject_duplicate_keys))
    try:
        _, value = document(inp)
    except ParseError as exc:
        log.debug("%s: %s", type(exc).__name__, exc)
        raise
    log.debug("parsed root %s", type(value).__name__)
    return value

# ---------------------------------------------------------------------------
# CLI ENTRYPOINT
# ---------------------------------------------------------------------------
def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse one document and print it.

    0 on success, 1 on a parse error, 2 when the input cannot be read.
    """
    ap = argparse.ArgumentParser(prog="mini-json", description="Parse a reduced-grammar JSON document")
    ap.add_argument("file", nargs="?", default="-", help="document to parse ('-' for stdin)")
    ap.add_argument("--max-depth", type=int, default=DEPTH_LIMIT_DEFAULT,
                    help="maximum nesting of arrays/objects")
    ap.add_argument("--reject-dup-keys", action="store_true", help="fail on repeated object keys")
    output = ap.add_mutually_exclusive_group()
    output.add_argument("--render", action="store_true", help="print compact text instead of the tree")
    output.add_argument("--check", action="store_true", help="only validate; print OK")
    ap.add_argument("--debug", action="store_true", help="enable debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        text = _read_source(args.file)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {args.file}: {exc}", file=sys.stderr)
        return 2

    try:
        value = parse(text, max_depth=args.max_depth, reject_duplicate_keys=args.reject_dup_keys)
    except ParseError as exc:
        line, column = exc.location(text)
        print(f"SyntaxError: {exc} (line {line}, column {column})", file=sys.stderr)
        return 1

    if args.check:
        print("OK")
    elif args.render:
        print(render(value))
    else:
        print(pformat(value))
    return 0

# ---------------------------------------------------------------------------
# MAIN GUARD
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
