from typing import List

from trending.storage.models import NewsItem
from trending.storage.repository import NewsRepository

DEFAULT_TRENDING_LIMIT = 20
DEFAULT_CATEGORY_LIMIT = 50


class NewsRanking:
    """
    Consultas de leitura do feed de trending.
    Não filtra por idade: quem remove linhas velhas é o sweep de retenção.
    """

    def __init__(self, repository: NewsRepository):
        self.repository = repository

    @staticmethod
    def _rank(items: List[NewsItem], limit: int) -> List[NewsItem]:
        # sort estável: empates ficam na ordem de inserção
        return sorted(items, key=lambda n: n.score, reverse=True)[:max(limit, 0)]

    def top_trending(self, limit: int = DEFAULT_TRENDING_LIMIT) -> List[NewsItem]:
        return self._rank(self.repository.get_all_news(), limit)

    def top_by_category(self, category: str, limit: int = DEFAULT_CATEGORY_LIMIT) -> List[NewsItem]:
        return self._rank(self.repository.get_news_by_category(category), limit)
