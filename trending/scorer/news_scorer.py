from typing import Dict, Optional

from trending.utils.tz_utils import hours_between

BASE_PER_REPETITION = 6

# (limite superior em horas, bônus) avaliados em ordem
AGE_BONUSES = (
    (1, 10),
    (3, 5),
)

CATEGORY_BONUSES: Dict[str, int] = {
    "Cricket": 3,
    "Politics": 2,
}

def age_bonus(created_at: int, now: int) -> int:
    age_hours = hours_between(created_at, now)
    for max_hours, bonus in AGE_BONUSES:
        if age_hours < max_hours:
            return bonus
    return 0

def category_bonus(category: Optional[str]) -> int:
    return CATEGORY_BONUSES.get(category or "", 0)

def score(repetition_count: int, category: Optional[str], created_at: int, now: int) -> int:
    """
    Score de trending: repetição * 6 + bônus de recência + bônus de categoria.
    Função pura; `now` e `created_at` em ms desde epoch.
    """
    return repetition_count * BASE_PER_REPETITION + age_bonus(created_at, now) + category_bonus(category)
