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

from cached_property import cached_property


class State:
    """
    Identity of a state in an automaton, represented as a set of string tags.

    A state built by a parser usually carries a single tag (its name). A
    state produced by subset construction carries the tags of every NFA state
    it stands for, so two states are equal exactly when their tag sets are
    equal, regardless of the order in which the tags were collected.

    States are immutable values: they can be hashed, used as dictionary keys
    and compared. The canonical (sorted) order of the tags is only used for
    ordering and output.

    Attributes:
        tags (frozenset): The tags of this state.

    Example:
        >>> State(["q1", "q0", "q1"]) == State(["q0", "q1"])
        True
        >>> State.from_tag("q0").label
        '{ q0 }'
    """

    def __init__(self, tags=()):
        """
        Initializes a new State.

        Args:
            tags (iterable): The string tags of the state. Duplicates are
                ignored.
        """
        if isinstance(tags, str):
            raise TypeError(
                f"State tags must be an iterable of strings, not {tags!r}; "
                "use State.from_tag() for a single tag"
            )
        self.tags = frozenset(tags)

    @classmethod
    def from_tag(cls, tag):
        """
        Returns a state with the single given tag.
        """
        return cls((tag,))

    @classmethod
    def union(cls, states):
        """
        Returns a state whose tags are the union of the tags of all the given
        states.

        Args:
            states (iterable): The State objects to combine.

        Returns:
            State: The combined state. Combining no states at all returns a
                state with no tags.
        """
        tags = set()
        for state in states:
            tags.update(state.tags)
        return cls(tags)

    @cached_property
    def sorted_tags(self):
        """The tags as a tuple in canonical (sorted) order."""
        return tuple(sorted(self.tags))

    @cached_property
    def label(self):
        """The tags rendered as ``{ a b c }``."""
        return "{ " + "".join(tag + " " for tag in self.sorted_tags) + "}"

    def __contains__(self, tag):
        return tag in self.tags

    def __iter__(self):
        return iter(self.sorted_tags)

    def __len__(self):
        return len(self.tags)

    def __eq__(self, other):
        if not isinstance(other, State):
            return NotImplemented
        return self.tags == other.tags

    def __hash__(self):
        return hash(self.tags)

    def __lt__(self, other):
        if not isinstance(other, State):
            return NotImplemented
        return self.sorted_tags < other.sorted_tags

    def __repr__(self):
        return f"{self.__class__.__name__}({list(self.sorted_tags)!r})"
