import pytest

from astro_rules.almuten import (
    ALMUTEN_PRIORITY,
    almuten_scores,
    check_mutual_reception,
    find_almuten,
    mutual_receptions,
)
from astro_rules.analysis.dignity import score_dignity
from astro_rules.models import PlanetPosition
from astro_rules.zodiac import SIGNS, TRADITIONAL_PLANETS


def test_tie_goes_to_earlier_planet():
    # Mars: domicile + term = 7; Sun: exaltation + day triplicity = 7
    scores = dict(almuten_scores("Aries", 25, True))
    assert scores["Mars"] == scores["Sun"] == 7
    assert find_almuten("Aries", 25, True) == "Sun"


def test_night_chart_changes_almuten():
    assert find_almuten("Aries", 25, False) == "Mars"


def test_almuten_has_the_highest_total():
    for sign in SIGNS:
        for degree in (0.0, 5.5, 10.0, 17.25, 29.75):
            for is_day in (True, False):
                winner = find_almuten(sign, degree, is_day)
                best = score_dignity(winner, sign, degree, is_day).total
                for planet in TRADITIONAL_PLANETS:
                    total = score_dignity(planet, sign, degree, is_day).total
                    assert total <= best
                    if total == best:
                        assert ALMUTEN_PRIORITY.index(winner) <= ALMUTEN_PRIORITY.index(planet)


def test_scores_list_every_traditional_planet():
    scores = almuten_scores("Cancer", 15.0, True)
    assert sorted(p for p, _ in scores) == sorted(TRADITIONAL_PLANETS)
    totals = [t for _, t in scores]
    assert totals == sorted(totals, reverse=True)


def test_mutual_reception_by_domicile():
    assert check_mutual_reception("Mars", "Taurus", "Venus", "Aries")
    assert check_mutual_reception("Venus", "Aries", "Mars", "Taurus")
    assert check_mutual_reception("Mars", "Libra", "Venus", "Scorpio")
    assert not check_mutual_reception("Mars", "Taurus", "Venus", "Libra")


def test_exaltation_does_not_count_as_reception():
    assert not check_mutual_reception("Sun", "Pisces", "Venus", "Aries")


def test_reception_with_modern_body_is_false():
    assert not check_mutual_reception("Pluto", "Aries", "Mars", "Scorpio")


def test_mutual_receptions_in_chart():
    positions = [
        PlanetPosition.from_longitude("Sun", 100.0),
        PlanetPosition.from_longitude("Moon", 130.0),  # Leo
        PlanetPosition.from_longitude("Mars", 40.0),  # Taurus
        PlanetPosition.from_longitude("Venus", 15.0),  # Aries
        PlanetPosition.from_longitude("Pluto", 220.0),
    ]
    assert mutual_receptions(positions) == [("Sun", "Moon"), ("Mars", "Venus")]


@pytest.mark.parametrize("sign,degree,expected", [("Leo", 5.0, "Sun"), ("Cancer", 3.0, "Moon")])
def test_almuten_of_domicile_and_triplicity(sign, degree, expected):
    assert find_almuten(sign, degree, True) == expected
