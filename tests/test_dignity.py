import unittest

import pytest

from astro_rules.analysis.dignity import (
    DETRIMENTS,
    DOMICILES,
    EXALTATIONS,
    FACES,
    FALLS,
    dignities_for_position,
    dignity_lords,
    score_dignity,
)
from astro_rules.errors import InvalidDegreeError, UnknownSignError
from astro_rules.models import PlanetPosition
from astro_rules.zodiac import SIGNS, TRADITIONAL_PLANETS


class DignityScoreTest(unittest.TestCase):
    def test_mars_in_late_aries_by_day(self) -> None:
        score = score_dignity("Mars", "Aries", 25, is_day_chart=True)

        self.assertTrue(score.domicile)
        self.assertTrue(score.term)  # 20-25° Aries is a Mars term
        self.assertFalse(score.face)  # last decan of Aries belongs to Venus
        self.assertFalse(score.triplicity)  # fire day ruler is the Sun
        self.assertFalse(score.peregrine)
        self.assertEqual(score.total, 7)

    def test_sun_in_leo_collects_domicile_and_triplicity(self) -> None:
        score = score_dignity("Sun", "Leo", 5, is_day_chart=True)
        self.assertEqual(score.dignities, ["domicile", "triplicity"])
        self.assertEqual(score.total, 8)

    def test_peregrine_depends_on_sect(self) -> None:
        night = score_dignity("Saturn", "Gemini", 15, is_day_chart=False)
        self.assertTrue(night.peregrine)
        self.assertEqual(night.total, -5)

        day = score_dignity("Saturn", "Gemini", 15, is_day_chart=True)
        self.assertTrue(day.triplicity)  # Saturn is the air day ruler
        self.assertFalse(day.peregrine)
        self.assertEqual(day.total, 3)

    def test_detriment_with_own_term_is_not_peregrine(self) -> None:
        score = score_dignity("Venus", "Aries", 10, is_day_chart=True)
        self.assertTrue(score.detriment)
        self.assertTrue(score.term)
        self.assertFalse(score.peregrine)
        self.assertEqual(score.total, -3)

    def test_fall_alone(self) -> None:
        score = score_dignity("Sun", "Libra", 1, is_day_chart=True)
        self.assertTrue(score.fall)
        self.assertFalse(score.peregrine)
        self.assertEqual(score.debilities, ["fall"])
        self.assertEqual(score.total, -4)

    def test_exaltation_ignores_exact_degree(self) -> None:
        score = score_dignity("Mars", "Capricorn", 28, is_day_chart=False)
        self.assertTrue(score.exaltation)
        self.assertTrue(score.term)
        self.assertEqual(score.total, 6)

        early = score_dignity("Mars", "Capricorn", 2, is_day_chart=False)
        self.assertTrue(early.exaltation)

    def test_modern_bodies_are_not_applicable(self) -> None:
        for planet in ("Uranus", "Neptune", "Pluto", "NorthNode", "SouthNode", "Chiron"):
            score = score_dignity(planet, "Scorpio", 12, is_day_chart=True)
            self.assertFalse(score.applicable)
            self.assertFalse(score.peregrine)
            self.assertEqual(score.total, 0)


def test_term_band_end_is_inclusive():
    assert dignity_lords("Aries", 6.0, True).term == "Jupiter"
    assert dignity_lords("Aries", 6.5, True).term == "Venus"
    assert dignity_lords("Aries", 29.5, True).term == "Saturn"


def test_face_boundaries():
    assert dignity_lords("Aries", 10.0, True).face == "Mars"
    assert dignity_lords("Aries", 10.5, True).face == "Sun"
    assert dignity_lords("Aries", 20.0, True).face == "Sun"
    assert dignity_lords("Aries", 20.5, True).face == "Venus"


def test_chaldean_faces_table():
    assert FACES["Taurus"] == ("Mercury", "Moon", "Saturn")
    assert FACES["Virgo"] == ("Sun", "Venus", "Mercury")
    assert FACES["Pisces"] == ("Saturn", "Jupiter", "Mars")


def test_dignity_lords_for_day_and_night():
    day = dignity_lords("Cancer", 15.0, True)
    assert day.domicile == "Moon"
    assert day.exaltation == "Jupiter"
    assert day.triplicity == "Venus"
    assert day.term == "Mercury"
    assert day.face == "Mercury"

    assert dignity_lords("Cancer", 15.0, False).triplicity == "Mars"
    assert dignity_lords("Gemini", 1.0, True).exaltation is None


def test_domicile_and_detriment_are_disjoint():
    for planet in TRADITIONAL_PLANETS:
        assert not set(DOMICILES[planet]) & set(DETRIMENTS[planet])
        assert EXALTATIONS[planet] != FALLS[planet]


def test_flags_respect_exclusivity_everywhere():
    for planet in TRADITIONAL_PLANETS:
        for sign in SIGNS:
            for degree in (0.0, 9.5, 19.5, 29.5):
                for is_day in (True, False):
                    score = score_dignity(planet, sign, degree, is_day)
                    assert not (score.domicile and score.detriment)
                    assert not (score.exaltation and score.fall)
                    has_any = bool(score.dignities) or score.detriment or score.fall
                    assert score.peregrine is not has_any


@pytest.mark.parametrize("degree", [-0.1, 30.0, 45.0])
def test_degree_outside_sign_is_rejected(degree):
    with pytest.raises(InvalidDegreeError):
        score_dignity("Mars", "Aries", degree, True)
    with pytest.raises(ValueError):
        score_dignity("Pluto", "Aries", degree, True)


def test_unknown_sign_is_rejected():
    with pytest.raises(UnknownSignError):
        score_dignity("Mars", "Ophiuchus", 3.0, True)


def test_scoring_is_idempotent():
    first = score_dignity("Jupiter", "Pisces", 14.25, False)
    second = score_dignity("Jupiter", "Pisces", 14.25, False)
    assert first == second


def test_position_helper_uses_sign_and_degree():
    pos = PlanetPosition.from_longitude("Mars", 25.0)
    assert dignities_for_position(pos, True).total == 7
