"""Shared fixtures for genogram tests."""

import os
import sys

import matplotlib
import pytest

matplotlib.use("Agg")

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from models import Gender, Person, PersonRecordSchema  # noqa: E402


def person(pid, gender, fathers=(), mothers=(), spouses=()):
    return Person(
        id=pid,
        name=pid,
        gender=Gender.MALE if gender == "M" else Gender.FEMALE,
        father_ids=list(fathers),
        mother_ids=list(mothers),
        spouse_ids=list(spouses),
    )


@pytest.fixture
def make_person():
    return person


@pytest.fixture
def schema():
    return PersonRecordSchema()


@pytest.fixture
def scenario_a():
    """One man, two wives, two children with the first and one with the second."""
    return [
        person("C3", "M", fathers=["M"], mothers=["S2"]),
        person("M", "M", spouses=["S1", "S2"]),
        person("S2", "F"),
        person("C2", "F", fathers=["M"], mothers=["S1"]),
        person("S1", "F"),
        person("C1", "M", fathers=["M"], mothers=["S1"]),
    ]


@pytest.fixture
def three_generations():
    """
    Two grandparent couples whose children marry each other.

    H2 declares the marriage to H1 from her side only, and B2 marries W,
    a woman with no recorded parents.
    """
    return [
        person("G1", "M", spouses=["G2"]),
        person("G2", "F"),
        person("H1", "M"),
        person("H2", "F", spouses=["H1"]),
        person("A", "M", fathers=["G1"], mothers=["G2"], spouses=["B"]),
        person("A2", "F", fathers=["G1"], mothers=["G2"]),
        person("B", "F", fathers=["H1"], mothers=["H2"]),
        person("B2", "M", fathers=["H1"], mothers=["H2"], spouses=["W"]),
        person("W", "F"),
        person("K1", "M", fathers=["A"], mothers=["B"]),
        person("K2", "F", fathers=["A"], mothers=["B"]),
        person("K3", "M", fathers=["B2"], mothers=["W"]),
    ]
