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
Command line tool that reads an automaton from a text file, converts it to a
total deterministic automaton and writes the result to another file.

Usage: nfa2dfa [options] <input> <output>
"""

import sys
from contextlib import suppress
from optparse import OptionParser

from loguru import logger

from nfa2dfa import versionstring
from nfa2dfa.automata.fsa import AutomatonError
from nfa2dfa.textformat import FileParser, ParseError, format_automaton
from nfa2dfa.util import now

LOG_FORMAT = "<level>{level: <8}</level> {message}"


def _parser():
    p = OptionParser(
        usage="%prog [options] <input> <output>",
        version=f"%prog {versionstring()}",
        description="Convert a (possibly epsilon) NFA into a total DFA.",
    )
    p.add_option(
        "-v",
        "--verbose",
        dest="level",
        action="store_const",
        const="DEBUG",
        help="Log each step of the conversion",
        default="INFO",
    )
    p.add_option(
        "-q",
        "--quiet",
        dest="level",
        action="store_const",
        const="ERROR",
        help="Only log errors",
    )
    p.add_option(
        "-e",
        "--encoding",
        dest="encoding",
        metavar="NAME",
        help="Text encoding of the input and output files",
        default="utf-8",
    )
    return p


def configure_logging(level, sink=None):
    """
    Enables the package's log messages and sends those at ``level`` or above
    to ``sink`` (standard error by default).

    Only loguru's own default handler is replaced; sinks added by the host
    program are left alone.

    Returns:
        int: The id of the new handler, for passing to ``logger.remove()``.
    """
    # Handler 0 is the stderr sink loguru installs on import
    with suppress(ValueError):
        logger.remove(0)
    handler_id = logger.add(sink or sys.stderr, level=level, format=LOG_FORMAT)
    logger.enable("nfa2dfa")
    return handler_id


def convert(input_path, output_path, encoding="utf-8"):
    """
    Reads the automaton in ``input_path``, determinizes it and writes the
    result to ``output_path``.

    Returns:
        Automaton: The deterministic automaton that was written.
    """
    nfa = FileParser(input_path, encoding=encoding).parse()
    logger.info(
        "Read {} states, {} symbols from {}", len(nfa), len(nfa.alphabet), input_path
    )

    t = now()
    dfa = nfa.to_deterministic()
    logger.info("Converted to {} states in {:0.4f} s", len(dfa), now() - t)

    text = format_automaton(dfa)
    with open(output_path, "w", encoding=encoding) as f:
        f.write(text)
    logger.info("Wrote {}", output_path)
    return dfa


def main(argv=None):
    """
    Runs the command line tool.

    Args:
        argv (list, optional): The arguments, not including the program name.
            Defaults to ``sys.argv[1:]``.

    Returns:
        int: The exit status: 0 on success, 1 if the input could not be read
            or converted or the output could not be written. Wrong usage exits
            with status 2.
    """
    parser = _parser()
    options, args = parser.parse_args(argv)
    if len(args) != 2:
        parser.error("expected an input and an output file")

    handler_id = configure_logging(options.level)
    input_path, output_path = args
    try:
        convert(input_path, output_path, encoding=options.encoding)
    except (OSError, UnicodeError, ParseError, AutomatonError) as e:
        logger.error("{}", e)
        return 1
    finally:
        logger.remove(handler_id)
    return 0
