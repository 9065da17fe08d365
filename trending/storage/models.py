from enum import Enum
from pydantic import BaseModel

DEFAULT_CATEGORY = "State"

class NewsItem(BaseModel):
    id: int
    title: str
    summary: str
    category: str = DEFAULT_CATEGORY
    topic_hash: str  # sha1 do título canônico, chave única de dedupe
    repetition_count: int = 1
    score: int = 0
    createdAt: int  # ms desde epoch da primeira aparição; nunca muda

class UpsertResult(str, Enum):
    skipped = "skipped"
    saved = "saved"
    updated = "updated"
