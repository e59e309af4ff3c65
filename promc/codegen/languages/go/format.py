"""
Deterministic formatting for generated Go source.

A small gofmt-style canonicalizer: it checks the lexical structure of the
text (brackets, string/rune literals, comments), then re-indents with tabs,
normalizes blank lines and aligns key/value and struct field columns. It
never reorders content, and formatting already formatted text is a no-op.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ...core.generator import GeneratorError


OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = {")": "(", "]": "[", "}": "{"}

_CODE = "code"
_STRING = "string"
_RUNE = "rune"
_RAW_STRING = "raw string"
_BLOCK_COMMENT = "block comment"

# Innermost block kinds that get column alignment
_STRUCT = "struct"
_LITERAL = "literal"
_DECL = "decl"

_KEY_VALUE = re.compile(r'^((?:[A-Za-z_][A-Za-z0-9_]*)|"(?:[^"\\]|\\.)*"):\s*(\S.*)$')
_FIELD = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\s+(\S.*)$")
_ASSIGN = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(\S.*)$")

# block kind -> (line pattern, text appended to the head, text before the value)
_ALIGNMENT = {
    _LITERAL: (_KEY_VALUE, ":", " "),
    _STRUCT: (_FIELD, "", " "),
    _DECL: (_ASSIGN, "", " = "),
}


class FormatError(GeneratorError):
    """Raised when generated text is not well-formed Go."""

    def __init__(self, message: str, line: int, column: int, source_line: str = ""):
        self.line = line
        self.column = column
        self.source_line = source_line
        self.excerpt = source_line.rstrip()
        if self.excerpt:
            caret = " " * (max(column, 1) - 1) + "^"
            super().__init__(
                f"{message} at line {line}, column {column}:\n{self.excerpt}\n{caret}"
            )
        else:
            super().__init__(f"{message} at line {line}, column {column}")


@dataclass
class _Opener:
    char: str
    line: int
    column: int
    kind: Optional[str]


@dataclass
class _SourceLine:
    number: int
    raw: str
    text: str
    indent: int = 0
    verbatim: bool = False
    block: Optional[str] = None

    @property
    def blank(self) -> bool:
        return not self.verbatim and not self.text

    def render(self) -> str:
        if self.verbatim:
            return self.raw
        if not self.text:
            return ""
        return "\t" * self.indent + self.text


def _depth(stack: List[_Opener]) -> int:
    # one indentation level per line that left brackets open
    return len({opener.line for opener in stack})


def _opener_kind(char: str, code_before: str) -> Optional[str]:
    stripped = code_before.rstrip()
    if char == "(":
        return _DECL if stripped in ("var", "const") else None
    if char != "{":
        return None
    if stripped.endswith(("struct", "interface")):
        return _STRUCT
    if code_before and not code_before[-1].isspace():
        return _LITERAL
    return None


def _scan(source: str) -> List[_SourceLine]:
    """Split source into lines, checking structure and computing indentation."""
    raw_lines = source.split("\n")
    stack: List[_Opener] = []
    state = _CODE
    state_start: Tuple[int, int] = (0, 0)
    result = []

    for number, raw in enumerate(raw_lines, start=1):
        starts_in = state
        if starts_in == _RAW_STRING:
            line = _SourceLine(number, raw, raw, verbatim=True)
            text, offset = raw, 0
        elif starts_in == _BLOCK_COMMENT:
            line = _SourceLine(number, raw.rstrip(), raw.strip(), verbatim=True)
            text, offset = raw, 0
        else:
            text = raw.strip()
            offset = len(raw) - len(raw.lstrip())
            line = _SourceLine(number, raw, text)

        indent = None
        i = 0
        while i < len(text):
            c = text[i]
            column = offset + i + 1

            if state == _CODE:
                if indent is None and c not in CLOSERS:
                    indent = _depth(stack)
                    line.block = stack[-1].kind if stack else None

                if c == "/" and text[i + 1:i + 2] == "/":
                    break
                if c == "/" and text[i + 1:i + 2] == "*":
                    state, state_start = _BLOCK_COMMENT, (number, column)
                    i += 2
                    continue
                if c == '"':
                    state, state_start = _STRING, (number, column)
                elif c == "'":
                    state, state_start = _RUNE, (number, column)
                elif c == "`":
                    state, state_start = _RAW_STRING, (number, column)
                elif c in OPENERS:
                    stack.append(_Opener(c, number, column, _opener_kind(c, text[:i])))
                elif c in CLOSERS:
                    if not stack:
                        raise FormatError(f"unexpected '{c}'", number, column, raw)
                    if stack[-1].char != CLOSERS[c]:
                        expected = OPENERS[stack[-1].char]
                        raise FormatError(
                            f"unexpected '{c}', expected '{expected}' to close "
                            f"'{stack[-1].char}' from line {stack[-1].line}",
                            number,
                            column,
                            raw,
                        )
                    stack.pop()

            elif state in (_STRING, _RUNE):
                quote = '"' if state == _STRING else "'"
                if c == "\\":
                    i += 2
                    continue
                if c == quote:
                    state = _CODE

            elif state == _RAW_STRING:
                if c == "`":
                    state = _CODE

            elif state == _BLOCK_COMMENT:
                if c == "*" and text[i + 1:i + 2] == "/":
                    state = _CODE
                    i += 2
                    continue

            i += 1

        if state in (_STRING, _RUNE):
            start_line, start_column = state_start
            raise FormatError(
                f"newline in {state} literal", start_line, start_column, raw_lines[start_line - 1]
            )

        if not line.verbatim:
            if indent is None:
                indent = _depth(stack)
                line.block = stack[-1].kind if stack else None
            line.indent = indent

        result.append(line)

    if state in (_RAW_STRING, _BLOCK_COMMENT):
        start_line, start_column = state_start
        raise FormatError(
            f"unterminated {state}", start_line, start_column, raw_lines[start_line - 1]
        )

    if stack:
        opener = stack[-1]
        raise FormatError(
            f"unclosed '{opener.char}'", opener.line, opener.column, raw_lines[opener.line - 1]
        )

    return result


def _normalize_blank_lines(lines: List[_SourceLine]) -> List[_SourceLine]:
    kept: List[_SourceLine] = []
    for line in lines:
        if line.blank:
            if not kept or kept[-1].blank:
                continue
            previous = kept[-1]
            if not previous.verbatim and previous.text.endswith(tuple(OPENERS)):
                continue
        kept.append(line)

    result: List[_SourceLine] = []
    for index, line in enumerate(kept):
        if line.blank:
            following = kept[index + 1] if index + 1 < len(kept) else None
            if following is None:
                continue
            if not following.verbatim and following.text.startswith(tuple(CLOSERS)):
                continue
        result.append(line)
    return result


def _align_run(run: List[Tuple[_SourceLine, re.Match]], kind: str) -> None:
    _, suffix, joiner = _ALIGNMENT[kind]
    width = max(len(match.group(1)) + len(suffix) for _, match in run)
    for line, match in run:
        head = f"{match.group(1)}{suffix}"
        line.text = f"{head.ljust(width)}{joiner}{match.group(2)}"


def _align_columns(lines: List[_SourceLine]) -> None:
    """Align key/value, struct field and var/const block columns."""
    run: List[Tuple[_SourceLine, re.Match]] = []
    run_key = None

    def flush():
        if run:
            _align_run(run, run_key[1])
        run.clear()

    for line in lines:
        match = None
        if not line.verbatim and line.block in _ALIGNMENT:
            match = _ALIGNMENT[line.block][0].match(line.text)

        key = (line.indent, line.block) if match else None
        if key is None or key != run_key:
            flush()
        run_key = key
        if match:
            run.append((line, match))
    flush()


def format_go_source(source: str) -> str:
    """
    Format Go source text deterministically.

    Args:
        source: Raw generated Go code

    Returns:
        Canonically formatted code ending in exactly one newline

    Raises:
        FormatError: If the text is not lexically well-formed
    """
    lines = _scan(source.replace("\r\n", "\n"))
    lines = _normalize_blank_lines(lines)
    _align_columns(lines)

    text = "\n".join(line.render() for line in lines).strip("\n")
    return text + "\n" if text else ""
