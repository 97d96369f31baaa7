import pytest

from schedsim.errors import UnsupportedAlgorithm
from schedsim.guide import GUIDES, comparison_analysis, guide_for
from schedsim.models import Algorithm, ComparisonEntry


def _entry(algorithm):
    return ComparisonEntry(algorithm, 0.0, 0.0)


def test_every_algorithm_has_a_guide():
    assert set(GUIDES) == set(Algorithm)
    for guide in GUIDES.values():
        assert guide.description and guide.basis and guide.example
        assert guide.pros and guide.cons


@pytest.mark.parametrize("name", ["rr", "Round Robin", Algorithm.ROUND_ROBIN])
def test_guide_for_resolves_names(name):
    assert guide_for(name) is GUIDES[Algorithm.ROUND_ROBIN]


def test_guide_for_unknown():
    with pytest.raises(UnsupportedAlgorithm):
        guide_for("lottery")


@pytest.mark.parametrize(
    "winner,phrase",
    [
        (Algorithm.SJF, "shorter jobs"),
        (Algorithm.SRTF, "shorter jobs"),
        (Algorithm.PRIORITY_NP, "priorities"),
        (Algorithm.PRIORITY_P, "priorities"),
        (Algorithm.ROUND_ROBIN, "quantum"),
        (Algorithm.HRRN, "happened to fit best"),
    ],
)
def test_winner_explanation(winner, phrase):
    winner_text, _ = comparison_analysis(_entry(winner), _entry(Algorithm.MLQ))
    assert phrase in winner_text


@pytest.mark.parametrize(
    "loser,phrase",
    [
        (Algorithm.LJF, "long jobs"),
        (Algorithm.LRTF, "long jobs"),
        (Algorithm.FCFS, "convoy effect"),
        (Algorithm.MLQ, "fit this workload poorly"),
    ],
)
def test_loser_explanation(loser, phrase):
    _, loser_text = comparison_analysis(_entry(Algorithm.SJF), _entry(loser))
    assert phrase in loser_text
