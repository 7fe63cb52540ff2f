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

import sys

from loguru import logger

from nfa2dfa.automata.state import State
from nfa2dfa.automata.transition import EPSILON, Transition

# Tag of the synthetic state that absorbs every missing transition when a
# DFA is made total
NEVER = "!"


# Exceptions


class AutomatonError(Exception):
    """
    Base class for errors raised while building or transforming an automaton.
    """


class UnknownStateError(AutomatonError, KeyError):
    """
    Raised when a state given by value (a State or a tag) does not match any
    state of the automaton.

    This usually means the automaton was built with a dangling reference, for
    example an accept state or a transition naming a state that was never
    pushed.

    Attributes:
        state (State): The state that could not be resolved.
    """

    def __init__(self, state):
        self.state = state
        super().__init__(f"Unknown state {state.label}")

    def __str__(self):
        return self.args[0]


class StateIndexError(AutomatonError, IndexError):
    """
    Raised when a state index is outside the range of pushed states.
    """


# Automaton


class Automaton:
    """
    A finite automaton stored as parallel, index-addressed lists.

    States never point at each other directly: every transition, accept state
    and the entry state refer to states by their index in ``states``. An
    index is assigned when the state is pushed and never changes, since
    states are only ever appended.

    The same class represents both the input NFA (which may contain several
    transitions on one symbol and epsilon transitions, labelled with the
    empty string) and the DFA produced by :meth:`to_deterministic`.

    Methods that take a state reference accept either an ``int`` index, a
    :class:`State`, or a plain string naming a single-tag state.

    Attributes:
        alphabet (list): The input symbols, in insertion order.
        states (list): The State objects; the position of a state is its
            index.
        entry_state (int): Index of the initial state. Defaults to 0.
        accept_states (list): Indices of the accepting states, in the order
            they were added.
        transitions (list): For each state index, the list of Transition
            objects leaving that state.

    Treat these lists as read-only and build the automaton through the
    ``push_*`` methods: lookups by value go through an index kept in step with
    them, which direct edits would leave stale.

    Example:
        >>> a = Automaton()
        >>> a.push_state("p"), a.push_state("q")
        (0, 1)
        >>> a.push_symbol("x")
        >>> a.add_transition("p", "x", "q")
        >>> a.push_accept_state("q")
        >>> a.move_from_with("p", "x")
        [1]
    """

    def __init__(self):
        self.alphabet = []
        self.states = []
        self.entry_state = 0
        self.accept_states = []
        self.transitions = []
        self._indices = {}
        self._accepting = set()

    def __len__(self):
        """
        Returns the number of states in the automaton.
        """
        return len(self.states)

    def __getitem__(self, ref):
        return self.states[self.index_of(ref)]

    def __eq__(self, other):
        """
        Checks whether two automata are structurally equal.

        Two automata are equal when they have the same alphabet, the same
        states at the same indices, the same entry state, the same set of
        accept states and the same set of transitions leaving each state. The
        order in which accept states and transitions were added does not
        matter.
        """
        if not isinstance(other, Automaton):
            return NotImplemented
        if self.alphabet != other.alphabet or self.states != other.states:
            return False
        if self.entry_state != other.entry_state:
            return False
        if self._accepting != other._accepting:
            return False
        return [set(ts) for ts in self.transitions] == [
            set(ts) for ts in other.transitions
        ]

    __hash__ = None

    def __repr__(self):
        return (
            f"<{self.__class__.__name__} {len(self.states)} states, "
            f"{len(self.alphabet)} symbols>"
        )

    def __str__(self):
        from nfa2dfa.textformat import format_automaton

        return format_automaton(self)

    def is_empty(self):
        return not self.states

    # Lookup

    def find(self, state):
        """
        Returns the index of the first state structurally equal to the given
        state, or None if there is no such state.

        Args:
            state (State or str): The state to look for. A string is taken as
                the single-tag state with that tag.

        Returns:
            int or None: The index of the matching state.

        Example:
            >>> a = Automaton()
            >>> a.push_state(State.from_tag("p"))
            0
            >>> a.find(State.from_tag("p"))
            0
            >>> a.find("r") is None
            True
        """
        if isinstance(state, str):
            state = State.from_tag(state)
        return self._indices.get(state)

    def index_of(self, ref):
        """
        Resolves a state reference to a valid index.

        Args:
            ref (int, State or str): An index, a state, or the tag of a
                single-tag state.

        Returns:
            int: The index of the referenced state.

        Raises:
            StateIndexError: If ``ref`` is an index outside the range of
                pushed states.
            UnknownStateError: If ``ref`` is a state (or tag) that does not
                match any pushed state.
        """
        if isinstance(ref, (State, str)):
            index = self.find(ref)
            if index is None:
                if isinstance(ref, str):
                    ref = State.from_tag(ref)
                raise UnknownStateError(ref)
            return index

        if isinstance(ref, bool) or not isinstance(ref, int):
            raise TypeError(f"Can't use {ref!r} as a state reference")
        if not 0 <= ref < len(self.states):
            raise StateIndexError(
                f"State index {ref} out of range for {len(self.states)} states"
            )
        return ref

    # Building

    def push_state(self, state):
        """
        Appends a state along with an empty list of transitions for it.

        Args:
            state (State or str): The state to add. A string is taken as the
                tag of a single-tag state.

        Returns:
            int: The index of the new state.
        """
        if isinstance(state, str):
            state = State.from_tag(state)
        index = len(self.states)
        self.states.append(state)
        self.transitions.append([])
        self._indices.setdefault(state, index)
        return index

    def push_symbol(self, symbol):
        """
        Adds a symbol to the end of the alphabet. Adding a symbol that is
        already in the alphabet does nothing.

        Raises:
            ValueError: If the symbol is the empty string, which is reserved
                for epsilon transitions.
        """
        if symbol == EPSILON:
            raise ValueError("The empty symbol is reserved for epsilon transitions")
        if symbol not in self.alphabet:
            self.alphabet.append(symbol)

    def push_accept_state(self, ref):
        """
        Marks an existing state as accepting.
        """
        index = self.index_of(ref)
        if index not in self._accepting:
            self._accepting.add(index)
            self.accept_states.append(index)

    def set_entry_state(self, ref):
        """
        Makes an existing state the initial state.
        """
        self.entry_state = self.index_of(ref)

    def push_transition_from(self, ref, transition):
        """
        Adds a transition leaving the given state, unless an equal transition
        already leaves it.

        Args:
            ref (int, State or str): The source state.
            transition (Transition): The edge to add. Its ``end_state`` must
                be the index of an existing state.

        Raises:
            StateIndexError: If the source or destination index is out of
                range.
            UnknownStateError: If the source is given by value and is not
                found.
        """
        index = self.index_of(ref)
        self.index_of(transition.end_state)
        outgoing = self.transitions[index]
        if transition not in outgoing:
            outgoing.append(transition)

    def add_transition(self, src, label, dest):
        """
        Adds a transition from ``src`` to ``dest`` labelled ``label``, both
        states given as references. Use the empty string (``EPSILON``) as the
        label of an epsilon transition.
        """
        self.push_transition_from(src, Transition(label, self.index_of(dest)))

    # Queries

    def is_accepting(self, ref):
        return self.index_of(ref) in self._accepting

    def transitions_from(self, ref):
        """
        Returns the list of transitions leaving the given state.
        """
        return self.transitions[self.index_of(ref)]

    def move_from_with(self, ref, symbol):
        """
        Returns the indices of every state reachable from the given state by
        one transition labelled exactly ``symbol``.

        Args:
            ref (int, State or str): The source state.
            symbol (str): The label to follow.

        Returns:
            list: Destination indices, in the order the transitions were
                added.
        """
        return [t.end_state for t in self.transitions_from(ref) if t.symbol == symbol]

    def triples(self):
        """
        Generates every transition as a ``(source, symbol, destination)``
        triple of indices and labels, grouped by source state.
        """
        for src, outgoing in enumerate(self.transitions):
            for transition in outgoing:
                yield src, transition.symbol, transition.end_state

    def is_deterministic(self):
        """
        Checks whether every state has exactly one transition per symbol of
        the alphabet.

        A state passes when it has as many transitions as there are symbols
        and no two of them share a label, which also makes the automaton
        total.

        Returns:
            bool: True if the automaton is deterministic and total.
        """
        size = len(self.alphabet)
        for outgoing in self.transitions:
            if len(outgoing) != size:
                return False

            seen = set()
            for transition in outgoing:
                # A repeated label means the choice is not determined
                if transition.symbol in seen:
                    return False
                seen.add(transition.symbol)

        return True

    def e_closure_set(self, seeds):
        """
        Returns the epsilon closure of a set of states: every state reachable
        from one of the seeds by following zero or more epsilon transitions.

        The seeds themselves are always part of the closure. The result lists
        each index once, in discovery order: first the seeds, then states in
        the order a depth-first walk (using a stack) reaches them.

        Args:
            seeds (iterable): References to the starting states.

        Returns:
            list: Indices of the states in the closure.

        Example:
            >>> a = Automaton()
            >>> [a.push_state(name) for name in "pqr"]
            [0, 1, 2]
            >>> a.add_transition("p", EPSILON, "q")
            >>> a.add_transition("q", "x", "r")
            >>> a.e_closure_set([0])
            [0, 1]
        """
        closure = []
        for ref in seeds:
            index = self.index_of(ref)
            if index not in closure:
                closure.append(index)

        found = set(closure)
        stack = list(closure)
        while stack:
            index = stack.pop()
            for transition in self.transitions[index]:
                if not transition.is_epsilon():
                    continue

                dest = transition.end_state
                if dest not in found:
                    found.add(dest)
                    closure.append(dest)
                    stack.append(dest)

        return closure

    # Conversion

    def _subset(self, closure):
        # Returns the combined state for a closure of NFA states, and whether
        # any of them accepts
        state = State.union(self.states[i] for i in closure)
        accepting = not self._accepting.isdisjoint(closure)
        return state, accepting

    def to_deterministic(self):
        """
        Builds an equivalent deterministic, total automaton using subset
        construction.

        Each state of the result stands for the epsilon closure of a set of
        states of this automaton, and is identified by the union of their
        tags. A result state accepts when any state in its closure accepts.
        If some state of the result ends up without a transition for a
        symbol, a dead state tagged ``"!"`` is added and every missing
        transition (including those of the dead state itself) leads to it.

        This automaton is not modified.

        Returns:
            Automaton: A new automaton over the same alphabet for which
                :meth:`is_deterministic` is True.

        Raises:
            StateIndexError: If the automaton has no states.
        """
        if not self.states:
            raise StateIndexError("Can't determinize an automaton without states")

        closure = self.e_closure_set([self.entry_state])
        logger.debug("Entry closure covers {} of {} states", len(closure), len(self))
        state, accepting = self._subset(closure)

        dfa = Automaton()
        for symbol in self.alphabet:
            dfa.push_symbol(symbol)
        dfa.push_state(state)
        if accepting:
            dfa.push_accept_state(0)

        # The states of this automaton each result state stands for
        subsets = [closure]
        unmarked = [0]
        while unmarked:
            current = unmarked.pop()
            members = sorted(subsets[current])
            for symbol in self.alphabet:
                dests = []
                for index in members:
                    dests.extend(self.move_from_with(index, symbol))
                if not dests:
                    continue

                closure = self.e_closure_set(dests)
                state, accepting = self._subset(closure)
                target = dfa.find(state)
                if target is None:
                    target = dfa.push_state(state)
                    subsets.append(closure)
                    unmarked.append(target)
                    if accepting:
                        dfa.push_accept_state(target)

                dfa.push_transition_from(current, Transition(symbol, target))

        logger.debug("Subset construction produced {} states", len(dfa))
        if not dfa.is_deterministic():
            dfa._make_total()
        return dfa

    def _make_total(self):
        # Routes every missing (state, symbol) pair to a new dead state
        tag = NEVER
        while self.find(tag) is not None:
            tag += NEVER
        never = self.push_state(State.from_tag(tag))

        size = len(self.alphabet)
        added = 0
        for outgoing in self.transitions:
            if len(outgoing) == size:
                continue

            existing = {t.symbol for t in outgoing}
            for symbol in self.alphabet:
                if symbol not in existing:
                    outgoing.append(Transition(symbol, never))
                    added += 1

        logger.debug("Added dead state {} with {} incoming transitions", never, added)
        return never

    # Output

    def dump(self, stream=sys.stdout):
        """
        Writes a textual representation of the automaton to the given stream.

        Args:
            stream (file): The stream to write to. Defaults to sys.stdout.
        """
        from nfa2dfa.textformat import write_automaton

        write_automaton(self, stream)
