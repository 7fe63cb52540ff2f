# Copyright 2012 Matt Chaput. All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
#    1. Redistributions of source code must retain the above copyright notice,
#       this list of conditions and the following disclaimer.
#
#    2. Redistributions in binary form must reproduce the above copyright
#       notice, this list of conditions and the following disclaimer in the
#       documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY MATT CHAPUT ``AS IS'' AND ANY EXPRESS OR
# IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF
# MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO
# EVENT SHALL MATT CHAPUT OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT
# LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA,
# OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING
# NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#
# The views and conclusions contained in the software and documentation are
# those of the authors and should not be interpreted as representing official
# policies, either expressed or implied, of Matt Chaput.

"""
Reads and writes automata in a simple line-oriented text format.

An input file is made of sections. Each section starts with a header line,
followed by a line holding the number of entries, followed by the entries::

    Estados
    3
    q0 q1 q2

    Estados de aceptación
    1
    q2

    Alfabeto
    2
    a b

    Transiciones
    3
    q0 a q1
    q0 -1 q2
    q1 b q2

States, accept states and symbols are separated by whitespace and may span
several lines. Each transition takes one line: source state, symbol and
destination state. The symbol ``-1`` stands for an epsilon transition. The
first declared state is the initial state.

The output written by :func:`write_automaton` uses the same headers, lists
states by index along with their tags, and omits the counts.
"""

import io
import sys

from nfa2dfa.automata.fsa import Automaton, AutomatonError
from nfa2dfa.automata.transition import EPSILON

# Text standing for the epsilon symbol in transitions
EPSILON_LABEL = "-1"

STATES_HEADER = "Estados"
ACCEPT_HEADER = "Estados de aceptación"
ALPHABET_HEADER = "Alfabeto"
TRANSITIONS_HEADER = "Transiciones"

# Section identifiers
_STATES = 0
_ACCEPT = 1
_SYMBOLS = 2
_TRANSITIONS = 3

_headers = {
    STATES_HEADER: _STATES,
    ACCEPT_HEADER: _ACCEPT,
    "Estados de aceptacion": _ACCEPT,
    ALPHABET_HEADER: _SYMBOLS,
    TRANSITIONS_HEADER: _TRANSITIONS,
}

_names = {
    _STATES: "states",
    _ACCEPT: "accept states",
    _SYMBOLS: "symbols",
    _TRANSITIONS: "transitions",
}


# Exceptions


class ParseError(ValueError):
    """
    Raised when the text of an automaton is malformed.

    Attributes:
        lineno (int): The number of the offending line, starting at 1, or
            None if the error concerns the text as a whole.
    """

    def __init__(self, message, lineno=None):
        self.lineno = lineno
        if lineno is not None:
            message = f"Line {lineno}: {message}"
        super().__init__(message)


# Reading


def _add_name(automaton, section, name, lineno):
    try:
        if section == _STATES:
            if automaton.find(name) is not None:
                raise ParseError(f"Duplicate state {name!r}", lineno)
            automaton.push_state(name)
        elif section == _ACCEPT:
            automaton.push_accept_state(name)
        else:
            if name == EPSILON_LABEL:
                raise ParseError(f"{EPSILON_LABEL!r} can't be used as a symbol", lineno)
            automaton.push_symbol(name)
    except AutomatonError as e:
        raise ParseError(f"Unknown state {name!r}", lineno) from e


def _add_transition(automaton, line, lineno):
    parts = line.split()
    if len(parts) != 3:
        raise ParseError(f"Expected 'source symbol destination', found {line!r}", lineno)

    src, symbol, dest = parts
    if symbol == EPSILON_LABEL:
        symbol = EPSILON
    for name in (src, dest):
        if automaton.find(name) is None:
            raise ParseError(f"Unknown state {name!r} in transition", lineno)
    automaton.add_transition(src, symbol, dest)


def _check_count(section, expected, found, lineno):
    if section is None:
        return
    name = _names[section]
    if expected is None:
        raise ParseError(f"Missing the number of {name}", lineno)
    if found != expected:
        raise ParseError(f"Expected {expected} {name}, found {found}", lineno)


def parse_lines(lines):
    """
    Builds an automaton from an iterable of lines in the text format
    described in this module.

    Args:
        lines (iterable): The lines of text. Trailing newlines are ignored.

    Returns:
        Automaton: The automaton the text describes.

    Raises:
        ParseError: If the text is malformed, refers to an unknown state, or
            declares no states at all.
    """
    automaton = Automaton()
    section = None
    expected = None
    found = 0
    lineno = 0

    for lineno, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue

        if line in _headers:
            _check_count(section, expected, found, lineno)
            section = _headers[line]
            expected = None
            found = 0
            continue

        if section is None:
            raise ParseError(f"Unexpected line {line!r}", lineno)

        if expected is None:
            try:
                expected = int(line)
            except ValueError:
                raise ParseError(
                    f"Expected the number of {_names[section]}, found {line!r}", lineno
                ) from None
            if expected < 0:
                raise ParseError(f"Negative count {expected}", lineno)
            continue

        if section == _TRANSITIONS:
            if found == expected:
                raise ParseError(f"More than {expected} transitions", lineno)
            _add_transition(automaton, line, lineno)
            found += 1
        else:
            names = line.split()
            found += len(names)
            if found > expected:
                raise ParseError(f"More than {expected} {_names[section]}", lineno)
            for name in names:
                _add_name(automaton, section, name, lineno)

    _check_count(section, expected, found, lineno)
    if automaton.is_empty():
        raise ParseError("No states declared")
    return automaton


def parse_text(text):
    """
    Builds an automaton from a string in the text format.
    """
    return parse_lines(text.splitlines())


class AutomatonParser:
    """
    Base class for objects that produce an :class:`Automaton` from some
    source.
    """

    def parse(self):
        """
        Returns the parsed automaton.

        Raises:
            NotImplementedError: This method should be implemented in a
                subclass.
        """
        raise NotImplementedError


class FileParser(AutomatonParser):
    """
    Reads an automaton from a file in the text format.

    Example:
        >>> parser = FileParser("nfa.txt")
        >>> automaton = parser.parse()
    """

    def __init__(self, filename, encoding="utf-8"):
        """
        Args:
            filename (str): The path of the file to read.
            encoding (str, optional): The text encoding of the file. Defaults
                to "utf-8".
        """
        self.filename = filename
        self.encoding = encoding

    def parse(self):
        """
        Reads and parses the file.

        Raises:
            OSError: If the file can't be read.
            ParseError: If the file content is malformed or does not decode
                in the given encoding.
        """
        try:
            with open(self.filename, encoding=self.encoding) as f:
                return parse_lines(f)
        except UnicodeError as e:
            raise ParseError(f"Can't decode {self.filename} as {self.encoding}: {e}") from e


# Writing


def write_automaton(automaton, stream=sys.stdout):
    """
    Writes a human-readable listing of the automaton's states, accept states,
    alphabet and transitions to the given stream.

    Epsilon transitions are written with the symbol ``-1``.

    Args:
        automaton (Automaton): The automaton to write.
        stream (file, optional): The stream to write to. Defaults to
            sys.stdout.
    """
    stream.write(STATES_HEADER + "\n")
    for index, state in enumerate(automaton.states):
        stream.write(f"{index} = {state.label}\n")

    stream.write("\n" + ACCEPT_HEADER + "\n")
    for index in automaton.accept_states:
        stream.write(f"{index} ")

    stream.write("\n\n" + ALPHABET_HEADER + "\n")
    for symbol in automaton.alphabet:
        stream.write(f"{symbol} ")

    stream.write("\n\n" + TRANSITIONS_HEADER + "\n")
    for src, symbol, dest in automaton.triples():
        label = EPSILON_LABEL if symbol == EPSILON else symbol
        stream.write(f"{src} {label} {dest}\n")


def format_automaton(automaton):
    """
    Returns the listing written by :func:`write_automaton` as a string.
    """
    buf = io.StringIO()
    write_automaton(automaton, buf)
    return buf.getvalue()
