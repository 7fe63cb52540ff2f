from itertools import product

import pytest
from loguru import logger
from nfa2dfa.automata import (
    EPSILON,
    NEVER,
    Automaton,
    State,
    StateIndexError,
    Transition,
)
from nfa2dfa.textformat import format_automaton


def _build(names, edges, accept=(), alphabet=(), entry=None):
    a = Automaton()
    for name in names:
        a.push_state(name)
    for symbol in alphabet:
        a.push_symbol(symbol)
    for src, label, dest in edges:
        a.add_transition(src, label, dest)
    for name in accept:
        a.push_accept_state(name)
    if entry is not None:
        a.set_entry_state(entry)
    return a


def _closure_nfa(alphabet=("a", "b")):
    return _build(
        "012345",
        [
            ("0", "a", "1"),
            ("0", EPSILON, "2"),
            ("0", EPSILON, "3"),
            ("1", EPSILON, "3"),
            ("2", "b", "3"),
            ("3", EPSILON, "4"),
            ("4", "a", "5"),
        ],
        accept="5",
        alphabet=alphabet,
    )


def _abb_nfa():
    # Thompson construction of (a|b)*abb
    return _build(
        [str(i) for i in range(11)],
        [
            ("0", EPSILON, "1"),
            ("0", EPSILON, "7"),
            ("1", EPSILON, "2"),
            ("1", EPSILON, "4"),
            ("2", "a", "3"),
            ("4", "b", "5"),
            ("3", EPSILON, "6"),
            ("5", EPSILON, "6"),
            ("6", EPSILON, "1"),
            ("6", EPSILON, "7"),
            ("7", "a", "8"),
            ("8", "b", "9"),
            ("9", "b", "10"),
        ],
        accept=["10"],
        alphabet="ab",
    )


def _branching_nfa():
    # Words over {0, 1} whose third symbol from the end is 1
    return _build(
        ["s", "t", "u", "v"],
        [
            ("s", "0", "s"),
            ("s", "1", "s"),
            ("s", "1", "t"),
            ("t", "0", "u"),
            ("t", "1", "u"),
            ("u", "0", "v"),
            ("u", "1", "v"),
        ],
        accept=["v"],
        alphabet="01",
    )


def _nfa_accepts(a, word):
    current = set(a.e_closure_set([a.entry_state]))
    for symbol in word:
        dests = [d for s in current for d in a.move_from_with(s, symbol)]
        current = set(a.e_closure_set(dests))
    return any(a.is_accepting(s) for s in current)


def _dfa_accepts(d, word):
    state = d.entry_state
    for symbol in word:
        (state,) = d.move_from_with(state, symbol)
    return d.is_accepting(state)


def _words(alphabet, maxlen):
    for n in range(maxlen + 1):
        for word in product(alphabet, repeat=n):
            yield word


SAMPLES = [_closure_nfa, _abb_nfa, _branching_nfa]


def test_e_closure_discovery_order():
    a = _closure_nfa()
    assert a.e_closure_set([0, 1]) == [0, 1, 3, 4, 2]
    assert a.e_closure_set([3, 4, 5]) == [3, 4, 5]


def test_e_closure_accepts_state_references():
    a = _closure_nfa()
    assert a.e_closure_set(["0"]) == a.e_closure_set([0]) == [0, 2, 3, 4]
    assert a.e_closure_set([State.from_tag("1")]) == [1, 3, 4]
    assert a.e_closure_set([]) == []


def test_e_closure_duplicate_seeds():
    a = _closure_nfa()
    assert a.e_closure_set([3, 3]) == [3, 4]


def test_e_closure_cycle():
    a = _build("pqr", [("p", EPSILON, "q"), ("q", EPSILON, "p"), ("q", "x", "r")])
    assert a.e_closure_set([0]) == [0, 1]
    assert a.e_closure_set([1]) == [1, 0]
    assert a.e_closure_set([2]) == [2]


@pytest.mark.parametrize("make", SAMPLES)
def test_e_closure_is_closed(make):
    a = make()
    for seeds in ([i] for i in range(len(a))):
        closure = a.e_closure_set(seeds)
        assert set(seeds) <= set(closure)
        assert len(closure) == len(set(closure))
        for index in closure:
            for dest in a.move_from_with(index, EPSILON):
                assert dest in closure


def test_subset_construction():
    dfa = _closure_nfa().to_deterministic()

    assert dfa.alphabet == ["a", "b"]
    assert dfa.entry_state == 0
    assert dfa.states == [
        State(["0", "2", "3", "4"]),
        State(["1", "3", "4", "5"]),
        State(["3", "4"]),
        State(["5"]),
        State.from_tag(NEVER),
    ]
    assert dfa.accept_states == [1, 3]
    assert dfa.transitions == [
        [Transition("a", 1), Transition("b", 2)],
        [Transition("a", 3), Transition("b", 4)],
        [Transition("a", 3), Transition("b", 4)],
        [Transition("a", 4), Transition("b", 4)],
        [Transition("a", 4), Transition("b", 4)],
    ]


def test_render_determinized():
    dfa = _closure_nfa().to_deterministic()
    assert format_automaton(dfa) == (
        "Estados\n"
        "0 = { 0 2 3 4 }\n"
        "1 = { 1 3 4 5 }\n"
        "2 = { 3 4 }\n"
        "3 = { 5 }\n"
        "4 = { ! }\n"
        "\n"
        "Estados de aceptación\n"
        "1 3 \n"
        "\n"
        "Alfabeto\n"
        "a b \n"
        "\n"
        "Transiciones\n"
        "0 a 1\n"
        "0 b 2\n"
        "1 a 3\n"
        "1 b 4\n"
        "2 a 3\n"
        "2 b 4\n"
        "3 a 4\n"
        "3 b 4\n"
        "4 a 4\n"
        "4 b 4\n"
    )


def test_abb_textbook_result():
    dfa = _abb_nfa().to_deterministic()
    # The classic five subsets, and no dead state since every subset moves
    # on both symbols
    assert len(dfa) == 5
    assert State.from_tag(NEVER) not in dfa.states
    assert dfa.states[0] == State(["0", "1", "2", "4", "7"])
    assert dfa.accept_states == [dfa.find(State(["1", "10", "2", "4", "5", "6", "7"]))]


@pytest.mark.parametrize("make", SAMPLES)
def test_result_is_total_and_deterministic(make):
    dfa = make().to_deterministic()
    assert dfa.is_deterministic()
    for index in range(len(dfa)):
        outgoing = dfa.transitions_from(index)
        assert sorted(t.symbol for t in outgoing) == sorted(dfa.alphabet)
        assert not any(t.is_epsilon() for t in outgoing)
        for t in outgoing:
            assert 0 <= t.end_state < len(dfa)


@pytest.mark.parametrize("make", SAMPLES)
def test_states_are_distinct(make):
    dfa = make().to_deterministic()
    assert len(set(dfa.states)) == len(dfa.states)


@pytest.mark.parametrize("make", SAMPLES)
def test_accept_states_follow_subsets(make):
    nfa = make()
    dfa = nfa.to_deterministic()
    accepting_tags = set()
    for index in nfa.accept_states:
        accepting_tags.update(nfa.states[index].tags)

    for index, state in enumerate(dfa.states):
        assert dfa.is_accepting(index) == bool(state.tags & accepting_tags)


@pytest.mark.parametrize("make", SAMPLES)
def test_same_language(make):
    nfa = make()
    dfa = nfa.to_deterministic()
    for word in _words(nfa.alphabet, 6):
        assert _nfa_accepts(nfa, word) == _dfa_accepts(dfa, word), word


def test_input_is_not_modified():
    nfa = _closure_nfa()
    before = format_automaton(nfa)
    dfa = nfa.to_deterministic()
    assert format_automaton(nfa) == before
    assert dfa is not nfa
    assert dfa.alphabet is not nfa.alphabet


def test_entry_closure_can_accept():
    nfa = _build("pq", [("p", EPSILON, "q"), ("q", "x", "q")], accept="q", alphabet="x")
    dfa = nfa.to_deterministic()
    assert dfa.states == [State(["p", "q"]), State(["q"])]
    assert dfa.accept_states == [0, 1]
    assert dfa.is_deterministic()


def test_entry_state_is_respected():
    nfa = _build("pq", [("q", "x", "p")], accept="p", alphabet="x", entry="q")
    dfa = nfa.to_deterministic()
    assert dfa.states[0] == State.from_tag("q")
    assert dfa.states[1] == State.from_tag("p")
    assert dfa.accept_states == [1]


def test_already_deterministic_is_unchanged():
    a = _build(
        "pq",
        [
            ("p", "a", "q"),
            ("p", "b", "p"),
            ("q", "a", "q"),
            ("q", "b", "p"),
        ],
        accept="q",
        alphabet="ab",
    )
    assert a.is_deterministic()
    assert a.to_deterministic() == a


def test_determinizing_twice():
    dfa = _closure_nfa().to_deterministic()
    assert dfa.to_deterministic() == dfa


def test_empty_alphabet():
    dfa = _build("pq", [("p", EPSILON, "q")], accept="q").to_deterministic()
    assert dfa.states == [State(["p", "q"])]
    assert dfa.accept_states == [0]
    assert dfa.transitions == [[]]


def test_dead_state_tag_does_not_collide():
    nfa = _build([NEVER, "x"], [(NEVER, "a", "x")], alphabet="a")
    dfa = nfa.to_deterministic()
    assert dfa.states == [
        State.from_tag(NEVER),
        State.from_tag("x"),
        State.from_tag(NEVER + NEVER),
    ]
    assert dfa.move_from_with(1, "a") == [2]
    assert dfa.move_from_with(2, "a") == [2]


def test_only_dead_transitions():
    dfa = _build("p", [], alphabet="ab").to_deterministic()
    assert dfa.states == [State.from_tag("p"), State.from_tag(NEVER)]
    assert list(dfa.triples()) == [(0, "a", 1), (0, "b", 1), (1, "a", 1), (1, "b", 1)]
    assert dfa.accept_states == []


def test_no_states():
    with pytest.raises(StateIndexError):
        Automaton().to_deterministic()


def test_logs_conversion():
    messages = []
    logger.enable("nfa2dfa")
    handler = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        _closure_nfa().to_deterministic()
    finally:
        logger.remove(handler)
        logger.disable("nfa2dfa")

    assert any("Subset construction produced 4 states" in m for m in messages)
    assert any("dead state 4" in m for m in messages)
