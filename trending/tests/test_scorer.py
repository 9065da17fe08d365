# trending/tests/test_scorer.py
import pytest

from trending.scorer.news_scorer import score
from trending.utils.tz_utils import MS_PER_HOUR

NOW = 1_700_000_000_000

@pytest.mark.parametrize("age_hours, bonus", [
    (0, 10),
    (0.99, 10),
    (1, 5),
    (2.5, 5),
    (3, 0),
    (30, 0),
])
def test_age_bonus_boundaries(age_hours, bonus):
    created = NOW - int(age_hours * MS_PER_HOUR)
    assert score(1, "State", created, NOW) == 6 + bonus

@pytest.mark.parametrize("category, bonus", [
    ("Cricket", 3),
    ("Politics", 2),
    ("State", 0),
    ("cricket", 0),
    (None, 0),
])
def test_category_bonus(category, bonus):
    assert score(1, category, NOW - 5 * MS_PER_HOUR, NOW) == 6 + bonus

def test_scenarios_first_and_second_sighting():
    assert score(1, "Cricket", NOW, NOW) == 19
    assert score(2, "Cricket", NOW, NOW) == 25

def test_score_is_deterministic():
    created = NOW - 90 * 60 * 1000
    assert score(4, "Politics", created, NOW) == score(4, "Politics", created, NOW) == 4 * 6 + 5 + 2
