"""Door Lock: statewalk test generation walkthrough.

A door that can be opened, closed and locked with a code. Opening and
closing happen inside an UNLOCKED compound state; locking from anywhere in
it leaves for LOCKED, and unlocking returns through shallow history to the
last unlocked position. Wrong codes are rejected by a guard.

Generates every test sequence that reaches OPENED, taking each transition at
most ``--traversals`` times, and prints them.

Run:
    uv run python main.py
    uv run python main.py --traversals 2 --verbose
"""
from __future__ import annotations

import argparse
import logging

from statewalk import (
    INIT_EVENT,
    INIT_STATE,
    SHALLOW,
    ActionResult,
    FSMDef,
    Guard,
    Transition,
    make_history_states,
)
from statewalk_graph import all_n_transitions
from statewalk_testgen import (
    GeneratedInput,
    GenerationSettings,
    const_gen,
    generate_test_sequences,
)

CODE = "1234"

STATES = {
    "UNLOCKED": {"CLOSED": "", "OPENED": ""},
    "LOCKED": "",
}


# ---------------------------------------------------------------------------
# Actions and guards
# ---------------------------------------------------------------------------

def count_attempt(extended_state, event_data, settings):
    attempts = extended_state["attempts"] + 1
    return ActionResult(outputs=f"rejected #{attempts}", updates={"attempts": attempts})


def unlock(extended_state, event_data, settings):
    return ActionResult(outputs="unlocked", updates={"attempts": 0})


def announce(message):
    def action(extended_state, event_data, settings):
        return ActionResult(outputs=message)
    return action


def right_code(extended_state, code):
    return code == CODE


def wrong_code(extended_state, code):
    return code != CODE


# ---------------------------------------------------------------------------
# Machine and generators
# ---------------------------------------------------------------------------

def build_machine() -> tuple[FSMDef, list[Transition]]:
    hs = make_history_states(STATES)
    fsm_def = FSMDef(
        states=STATES,
        transitions=[
            Transition(INIT_STATE, INIT_EVENT, "UNLOCKED"),
            Transition("UNLOCKED", INIT_EVENT, "CLOSED"),
            Transition("CLOSED", "open", "OPENED", action=announce("opened")),
            Transition("OPENED", "close", "CLOSED", action=announce("closed")),
            Transition("UNLOCKED", "lock", "LOCKED", action=announce("locked")),
            Transition("LOCKED", "unlock", guards=(
                Guard(to=hs(SHALLOW, "UNLOCKED"), predicate=right_code, action=unlock),
                Guard(to="LOCKED", predicate=wrong_code, action=count_attempt),
            )),
        ],
        initial_extended_state={"attempts": 0},
        events=["open", "close", "lock", "unlock"],
    )

    def gen_wrong_code(extended_state, generator_state):
        # Give up after three wrong codes along a path.
        return GeneratedInput(input="0000", has_generated_input=extended_state["attempts"] < 3)

    generators = [
        Transition(INIT_STATE, INIT_EVENT, "UNLOCKED"),
        Transition("UNLOCKED", INIT_EVENT, "CLOSED"),
        Transition("CLOSED", "open", "OPENED", gen=const_gen(None)),
        Transition("OPENED", "close", "CLOSED", gen=const_gen(None)),
        Transition("UNLOCKED", "lock", "LOCKED", gen=const_gen(None)),
        Transition("LOCKED", "unlock", guards=(
            Guard(to=hs(SHALLOW, "UNLOCKED"), gen=const_gen(CODE)),
            Guard(to="LOCKED", gen=gen_wrong_code),
        )),
    ]
    return fsm_def, generators


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="Generate test sequences for a door lock")
    parser.add_argument("--traversals", type=int, default=1, help="max times each transition is taken")
    parser.add_argument("--verbose", action="store_true", help="log pruning decisions")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    fsm_def, generators = build_machine()
    settings = GenerationSettings(strategy=all_n_transitions("OPENED", args.traversals))
    test_cases = generate_test_sequences(fsm_def, generators, settings)

    print(f"{len(test_cases)} test case(s) reaching OPENED\n")
    for n, case in enumerate(test_cases, 1):
        inputs = ", ".join(f"{i.event}({i.data!r})" if i.data is not None else i.event
                           for i in case.input_sequence)
        print(f"#{n}")
        print(f"  states : {' -> '.join(case.control_state_sequence)}")
        print(f"  inputs : {inputs}")
        print(f"  outputs: {list(case.output_sequence)}")


if __name__ == "__main__":
    main()
