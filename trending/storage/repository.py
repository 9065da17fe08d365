import os, json, logging
from contextlib import contextmanager
from threading import Lock
from typing import Dict, Iterator, List, Optional, Tuple

from trending.storage.models import NewsItem, UpsertResult, DEFAULT_CATEGORY
from trending.scorer.news_scorer import score
from trending.topics import canonicalize, topic_key
from trending.utils.tz_utils import now_ms

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = os.path.join(os.path.dirname(__file__), "data", "news.json")
DEFAULT_LOCK_TIMEOUT_SEC = 10.0


class StoreError(Exception):
    """Falha de armazenamento que deve virar erro para quem chamou."""

class StoreTimeoutError(StoreError):
    pass

class StoreClosedError(StoreError):
    pass

class StoreCorruptedError(StoreError):
    pass


class NewsRepository:
    """
    Coleção `news` persistida em um arquivo JSON.

    Toda operação roda sob um único lock com timeout, então o
    lookup -> branch -> write do upsert é indivisível: dois inserts
    para o mesmo topic_hash nunca acontecem.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH, lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SEC):
        self.db_path = db_path
        self.lock_timeout = lock_timeout
        self._lock = Lock()
        self._open = False

    @classmethod
    def from_env(cls, load_env: bool = True, dotenv_override: bool = True) -> "NewsRepository":
        """Cria o repositório lendo NEWS_DB_PATH e STORE_LOCK_TIMEOUT_SEC do ambiente/.env."""
        if load_env:
            from dotenv import load_dotenv
            load_dotenv(override=dotenv_override)
        return cls(
            db_path=os.getenv("NEWS_DB_PATH", DEFAULT_DB_PATH),
            lock_timeout=float(os.getenv("STORE_LOCK_TIMEOUT_SEC", DEFAULT_LOCK_TIMEOUT_SEC)),
        )

    # ---------- Ciclo de vida ----------
    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> "NewsRepository":
        """Cria diretório e coleção vazia se ainda não existirem."""
        dirname = os.path.dirname(self.db_path)
        if dirname:
            os.makedirs(dirname, exist_ok=True)
        with self._locked(check_open=False):
            if not os.path.exists(self.db_path):
                self._write({"next_id": 1, "news": []})
            else:
                self._read()  # valida o arquivo já na abertura
            self._open = True
        logger.info("News store opened at %s", self.db_path)
        return self

    def close(self) -> None:
        with self._locked(check_open=False):
            self._open = False
        logger.info("News store closed")

    # ---------- Helpers internos ----------
    @contextmanager
    def _locked(self, check_open: bool = True) -> Iterator[None]:
        if not self._lock.acquire(timeout=self.lock_timeout):
            raise StoreTimeoutError(f"timed out after {self.lock_timeout}s waiting for the news store")
        try:
            if check_open and not self._open:
                raise StoreClosedError("news store is not open")
            yield
        finally:
            self._lock.release()

    def _read(self) -> dict:
        try:
            with open(self.db_path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError as e:
            raise StoreError(f"news store file missing: {self.db_path}") from e
        except OSError as e:
            raise StoreError(f"could not read news store: {e}") from e
        except json.JSONDecodeError as e:
            raise StoreCorruptedError(f"news store is corrupted: {e}") from e
        if not isinstance(raw, dict) or not isinstance(raw.get("news"), list):
            raise StoreCorruptedError("news store has an unexpected layout")
        return raw

    def _write(self, raw: dict) -> None:
        # grava em arquivo temporário e troca, para nunca deixar JSON pela metade
        tmp_path = f"{self.db_path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(raw, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.db_path)
        except OSError as e:
            raise StoreError(f"could not write news store: {e}") from e

    def _load(self) -> Tuple[Dict[str, NewsItem], int]:
        raw = self._read()
        try:
            items = [NewsItem(**row) for row in raw["news"]]
            stored_next = int(raw.get("next_id", 1))
        except (TypeError, ValueError) as e:
            raise StoreCorruptedError(f"invalid row in news store: {e}") from e
        # next_id persistido evita reuso de id depois do sweep
        next_id = max([stored_next] + [n.id + 1 for n in items])
        return {n.topic_hash: n for n in items}, next_id

    def _save(self, db: Dict[str, NewsItem], next_id: int) -> None:
        self._write({"next_id": next_id, "news": [n.model_dump() for n in db.values()]})

    # ---------- Escrita ----------
    def upsert(self, title: Optional[str], summary: Optional[str],
               category: Optional[str] = None, now: Optional[int] = None) -> UpsertResult:
        if not title or not summary:
            return UpsertResult.skipped

        key = topic_key(canonicalize(title))
        now = now_ms() if now is None else now

        with self._locked():
            db, next_id = self._load()
            existing = db.get(key)

            if existing is not None:
                # categoria e createdAt da primeira aparição mandam no merge
                existing.repetition_count += 1
                existing.score = score(existing.repetition_count, existing.category, existing.createdAt, now)
                self._save(db, next_id)
                logger.debug("Merged topic %s (count=%d, score=%d)", key, existing.repetition_count, existing.score)
                return UpsertResult.updated

            category = category or DEFAULT_CATEGORY
            db[key] = NewsItem(
                id=next_id,
                title=title,
                summary=summary,
                category=category,
                topic_hash=key,
                repetition_count=1,
                score=score(1, category, now, now),
                createdAt=now,
            )
            self._save(db, next_id + 1)
            logger.debug("Saved new topic %s (category=%s)", key, category)
            return UpsertResult.saved

    def delete_older_than(self, retention_ms: int, now: Optional[int] = None) -> int:
        """Remove toda linha com createdAt anterior a now - retention_ms. Retorna quantas saíram."""
        now = now_ms() if now is None else now
        cutoff = now - retention_ms
        with self._locked():
            db, next_id = self._load()
            expired = [k for k, n in db.items() if n.createdAt < cutoff]
            if not expired:
                return 0
            for k in expired:
                del db[k]
            self._save(db, next_id)
        return len(expired)

    # ---------- Leitura ----------
    def get_all_news(self) -> List[NewsItem]:
        with self._locked():
            return list(self._load()[0].values())

    def get_news_by_category(self, category: str) -> List[NewsItem]:
        with self._locked():
            return [n for n in self._load()[0].values() if n.category == category]

    def get_by_topic_hash(self, topic_hash: str) -> Optional[NewsItem]:
        with self._locked():
            return self._load()[0].get(topic_hash)
