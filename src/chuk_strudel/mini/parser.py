"""
Mini-notation parser.

Turns compact pattern text into a Pattern tree:

    "c e g"        three steps in one cycle
    "c ~ e"        rest in the middle
    "c [e g]"      sub-sequence sharing one step
    "<c e g>"      one step per cycle
    "c, e, g"      layers played together
    "c*2 e/2"      step played twice / over two cycles
    "c@3 e"        weighted step (c takes 3/4 of the cycle)
    "c!3 e"        step repeated
    "c e . g a b"  feet: groups separated by '.'

Atoms are plain words ("c3", "bd:2", "0.5", "-1", "t"); the caller decides
what an atom means by passing an atom factory.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from fractions import Fraction
from typing import NoReturn

from chuk_strudel.constants import REST_TOKEN, ErrorMessages
from chuk_strudel.core.rhythm import to_time
from chuk_strudel.errors import MiniNotationError
from chuk_strudel.models.voice import VoiceData
from chuk_strudel.pattern.base import Pattern
from chuk_strudel.pattern.primitives import (
    AtomicPattern,
    fast,
    sequence,
    silence,
    slow,
    slowcat,
    stack,
)

AtomFactory = Callable[[str], VoiceData]

_TOKEN_REGEX = re.compile(r"\s*(?:(?P<symbol>[\[\]<>,*/@!])|(?P<word>[^\s\[\]<>,*/@!]+))")
_CLOSING = {"[": "]", "<": ">"}


@dataclass(frozen=True)
class _Token:
    text: str
    position: int
    is_word: bool


def _tokenize(text: str) -> list[_Token]:
    tokens = []
    position = 0
    while position < len(text):
        if text[position:].strip() == "":
            break
        match = _TOKEN_REGEX.match(text, position)
        if match is None:
            raise MiniNotationError(
                ErrorMessages.UNEXPECTED_TOKEN.format(token=text[position], position=position, text=text),
                text,
                position,
            )
        symbol, word = match.group("symbol"), match.group("word")
        start = match.start("symbol") if symbol else match.start("word")
        tokens.append(_Token(symbol or word, start, word is not None))
        position = match.end()
    return tokens


class _Parser:
    """Recursive descent over the token list."""

    def __init__(self, text: str, atom_factory: AtomFactory):
        self.text = text
        self.atom_factory = atom_factory
        self.tokens = _tokenize(text)
        self.index = 0

    def parse(self) -> Pattern:
        pattern = self._sequence(closing=None)
        if self.index < len(self.tokens):
            self._unexpected(self.tokens[self.index])
        return pattern

    # -- structure -------------------------------------------------------------

    def _sequence(self, closing: str | None) -> Pattern:
        """Layers of weighted steps, up to the closing bracket."""
        layers = self._layers(closing)
        return stack([self._build_layer(feet) for feet in layers])

    def _alternation(self) -> Pattern:
        """'<a b c>' - one step per cycle; layers play together."""
        layers = self._layers(">")
        built = []
        for feet in layers:
            steps = [pattern for foot in feet for pattern, _ in foot]
            built.append(slowcat(steps))
        return stack(built)

    def _layers(self, closing: str | None) -> list[list[list[tuple[Pattern, Fraction]]]]:
        """Read steps until `closing`; returns layers -> feet -> steps."""
        layers: list[list[list[tuple[Pattern, Fraction]]]] = [[[]]]
        while True:
            token = self._peek()
            if token is None:
                if closing is not None:
                    raise MiniNotationError(
                        ErrorMessages.UNCLOSED_GROUP.format(closing=closing, text=self.text), self.text
                    )
                break
            if not token.is_word and token.text == closing:
                self.index += 1
                break
            if not token.is_word and token.text == ",":
                self.index += 1
                layers.append([[]])
                continue
            if token.is_word and token.text == ".":
                self.index += 1
                layers[-1].append([])
                continue
            self._step(layers[-1][-1])
        return layers

    def _build_layer(self, feet: list[list[tuple[Pattern, Fraction]]]) -> Pattern:
        feet = [foot for foot in feet if foot]
        if not feet:
            return silence()
        if len(feet) == 1:
            return sequence(feet[0])
        return sequence([sequence(foot) for foot in feet])

    # -- steps -----------------------------------------------------------------

    def _step(self, steps: list[tuple[Pattern, Fraction]]) -> None:
        """Parse one step with its postfix operators and append it."""
        token = self._next()
        if token.is_word:
            pattern = self._atom(token.text)
        elif token.text in _CLOSING:
            pattern = self._sequence(_CLOSING[token.text]) if token.text == "[" else self._alternation()
        elif token.text == "!" and steps:
            # bare '!' repeats the previous step
            steps.append(steps[-1])
            return
        else:
            self._unexpected(token)

        weight = Fraction(1)
        repeats = 1
        while True:
            op = self._peek()
            if op is None or op.is_word or op.text not in "*/@!":
                break
            self.index += 1
            if op.text == "!" and not self._peek_is_number():
                repeats += 1
                continue
            amount = self._number()
            if op.text == "*":
                pattern = fast(pattern, amount)
            elif op.text == "/":
                pattern = slow(pattern, amount)
            elif op.text == "@":
                weight = amount
            else:
                repeats += int(amount) - 1

        steps.extend([(pattern, weight)] * repeats)

    def _atom(self, word: str) -> Pattern:
        if word == REST_TOKEN:
            return silence()
        return AtomicPattern(self.atom_factory(word))

    # -- token helpers ----------------------------------------------------------

    def _peek(self) -> _Token | None:
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    def _next(self) -> _Token:
        token = self._peek()
        if token is None:
            raise MiniNotationError(f"Unexpected end of {self.text!r}", self.text, len(self.text))
        self.index += 1
        return token

    def _peek_is_number(self) -> bool:
        token = self._peek()
        if token is None or not token.is_word:
            return False
        try:
            to_time(token.text)
        except (ValueError, ZeroDivisionError):
            return False
        return True

    def _number(self) -> Fraction:
        token = self._next()
        try:
            return to_time(token.text)
        except (ValueError, ZeroDivisionError):
            raise MiniNotationError(
                f"Expected a number after operator at position {token.position} in {self.text!r}",
                self.text,
                token.position,
            ) from None

    def _unexpected(self, token: _Token) -> NoReturn:
        raise MiniNotationError(
            ErrorMessages.UNEXPECTED_TOKEN.format(token=token.text, position=token.position, text=self.text),
            self.text,
            token.position,
        )


def parse_mini_notation(text: str, atom_factory: AtomFactory) -> Pattern:
    """
    Parse mini-notation text.

    Args:
        text: Mini-notation source, e.g. "c3 [e3 g3] <a3 b3>"
        atom_factory: Builds the voice data of one atom from its raw token

    Returns:
        The parsed pattern (silence for blank text)

    Raises:
        MiniNotationError: If the text is malformed
    """
    if not text.strip():
        return silence()
    return _Parser(text, atom_factory).parse()
