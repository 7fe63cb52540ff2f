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

# Label of a silent transition, consumed without reading any input
EPSILON = ""


class Transition:
    """
    An edge leaving an (implicit) source state.

    The transition only knows its label and the index of the state it leads
    to; the automaton owning it knows which state it leaves from.

    Attributes:
        symbol (str): The label of the edge. The empty string (``EPSILON``)
            marks an epsilon transition.
        end_state (int): Index of the destination state.
    """

    __slots__ = ("_symbol", "_end_state")

    def __init__(self, symbol, end_state):
        self._symbol = symbol
        self._end_state = end_state

    @property
    def symbol(self):
        return self._symbol

    @property
    def end_state(self):
        return self._end_state

    def is_epsilon(self):
        """Returns True if this transition does not consume a symbol."""
        return self._symbol == EPSILON

    def __eq__(self, other):
        if not isinstance(other, Transition):
            return NotImplemented
        return self._symbol == other._symbol and self._end_state == other._end_state

    def __hash__(self):
        return hash((self._symbol, self._end_state))

    def __repr__(self):
        return f"{self.__class__.__name__}({self._symbol!r}, {self._end_state!r})"
