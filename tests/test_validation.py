"""Tests for relationship validation."""

import networkx as nx

from graph import PARENT_OF, SPOUSE_OF
from validation import validate_graph, validate_persons


def test_clean_input_has_no_warnings(three_generations, schema):
    assert validate_persons(three_generations, schema) == []


def test_duplicate_ids(make_person, schema):
    people = [make_person("A", "M"), make_person("A", "F")]
    warnings = validate_persons(people, schema)
    assert any("Duplicate id 'A'" in w for w in warnings)


def test_unknown_references(make_person, schema):
    people = [make_person("A", "M", fathers=["ghost"], spouses=["nobody"])]
    warnings = validate_persons(people, schema)
    assert "'A' references unknown father 'ghost'" in warnings
    assert "'A' references unknown spouse 'nobody'" in warnings


def test_too_many_parents(make_person, schema):
    people = [
        make_person("F1", "M"),
        make_person("F2", "M"),
        make_person("K", "F", fathers=["F1", "F2"]),
    ]
    warnings = validate_persons(people, schema)
    assert "'K' lists 2 fathers and 0 mothers" in warnings


def test_parent_cycle(make_person, schema):
    people = [make_person("A", "M", fathers=["B"]), make_person("B", "M", fathers=["A"])]
    warnings = validate_persons(people, schema)
    assert any(w.startswith("Cycle detected") for w in warnings)


def test_spouse_and_parent(make_person, schema):
    people = [make_person("A", "M", spouses=["B"]), make_person("B", "F", fathers=["A"])]
    warnings = validate_persons(people, schema)
    assert "A and B are recorded as both spouses and parent/child" in warnings


def test_validate_graph_directly():
    G = nx.MultiDiGraph()
    G.add_edge("P", "C", key="father", relationship_type=PARENT_OF)
    G.add_edge("P", "Q", key="spouse", relationship_type=SPOUSE_OF)
    assert validate_graph(G) == []
