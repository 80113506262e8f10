"""
Pytest configuration and shared fixtures for the Waypoint test suite.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset the package logger level after each test to ensure isolation."""
    import logging

    yield

    logging.getLogger("waypoint").setLevel(logging.NOTSET)


def _is(field, value):
    """Guard factory: state[field] == value."""
    return lambda state: state.get(field) == value


@pytest.fixture
def survey_graph():
    """Question-type survey: two conditional routes and a catchall."""
    from waypoint.schemas import catchall, create_graph, node, to

    return create_graph({
        "questionType": node([
            to("monthYear", _is("questionType", "monthYear")),
            to("date", _is("questionType", "date")),
            catchall("multipleChoice"),
        ]),
        "monthYear": node([catchall("finish")]),
        "date": node([catchall("finish")]),
        "multipleChoice": node([catchall("finish")]),
        "finish": node([]),
    })


@pytest.fixture
def fanout_graph():
    """
    Nine nodes: questionType fans out to four successors, two of which
    converge on details; details and unknown lead to finish; unused is
    disconnected.
    """
    from waypoint.schemas import catchall, create_graph, node, to

    return create_graph({
        "questionType": node([
            to("monthYear", _is("questionType", "monthYear")),
            to("date", _is("questionType", "date")),
            to("freeText", _is("questionType", "freeText")),
            catchall("multipleChoice"),
        ]),
        "monthYear": node([catchall("details")]),
        "date": node([catchall("details")]),
        "freeText": node([catchall("unknown")]),
        "multipleChoice": node([
            to("unknown", _is("hasOther", True)),
            catchall("finish"),
        ]),
        "details": node([catchall("finish")]),
        "unknown": node([catchall("finish")]),
        "finish": node([]),
        "unused": node([]),
    })


@pytest.fixture
def three_cycle_graph():
    """first -> second -> third -> first, each via catchall."""
    from waypoint.schemas import catchall, create_graph, node

    return create_graph({
        "first": node([catchall("second")]),
        "second": node([catchall("third")]),
        "third": node([catchall("first")]),
    })
