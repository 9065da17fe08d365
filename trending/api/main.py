import time
import logging
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from apscheduler.schedulers.background import BackgroundScheduler
from contextlib import asynccontextmanager
from pydantic import BaseModel
from typing import Optional
from dotenv import load_dotenv
import os

from trending.storage.repository import NewsRepository, StoreError, StoreTimeoutError
from trending.ranking.news_ranking import NewsRanking, DEFAULT_TRENDING_LIMIT, DEFAULT_CATEGORY_LIMIT
from trending.utils.tz_utils import MS_PER_HOUR, now_ms, ms_to_local_str


# Carrega variáveis do .env
load_dotenv(override=True)

PORT = int(os.getenv("PORT", "5051"))
SWEEP_INTERVAL_MINUTES = int(os.getenv("SWEEP_INTERVAL_MINUTES", "15"))   # intervalo do sweep de retenção (min)
RETENTION_HOURS = int(os.getenv("RETENTION_HOURS", "24"))                  # idade máxima de um tópico (h)
MAX_PAGE_LIMIT = 100

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Handle do store; aberto/fechado no lifespan e injetado via app.state
repository = NewsRepository.from_env(load_env=False)

# Scheduler com configurações para evitar empilhamento de jobs
scheduler = BackgroundScheduler(
    job_defaults={
        "coalesce": True,         # junta execuções atrasadas
        "max_instances": 1,       # não roda dois iguais ao mesmo tempo
        "misfire_grace_time": 30, # 30s de tolerância
    }
)


class RawNewsIn(BaseModel):
    title: Optional[str] = None
    summary: Optional[str] = None
    category: Optional[str] = None


def sweep_expired_news(repo: NewsRepository, now: Optional[int] = None) -> int:
    """
    Remove tópicos cuja primeira aparição saiu da janela de retenção.
    Falhas são logadas e engolidas aqui para não derrubar o scheduler.
    """
    now = now_ms() if now is None else now
    retention_ms = RETENTION_HOURS * MS_PER_HOUR
    try:
        removed = repo.delete_older_than(retention_ms, now=now)
    except Exception:
        logger.exception("[sweep] retention sweep failed")
        return 0
    logger.info("[sweep] removed %d topic(s) first seen before %s", removed, ms_to_local_str(now - retention_ms))
    return removed


@asynccontextmanager
async def lifespan(app: FastAPI):
    repo = repository.open()
    app.state.repository = repo
    app.state.ranking = NewsRanking(repo)

    scheduler.add_job(
        sweep_expired_news,
        "interval",
        minutes=SWEEP_INTERVAL_MINUTES,
        id="retention_sweep",
        args=[repo],
        replace_existing=True,
    )
    scheduler.start()

    # Primeira execução imediata para limpar o que venceu com o serviço parado
    sweep_expired_news(repo)

    yield
    scheduler.shutdown(wait=False)
    repo.close()

#%% APP

app = FastAPI(lifespan=lifespan)

# Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=512)


@app.exception_handler(StoreTimeoutError)
async def store_timeout_handler(request: Request, exc: StoreTimeoutError):
    logger.error("Store timeout on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})

@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/health")
def health():
    return {"status": "ok", "ts": int(time.time())}

# POST
@app.post("/api/news/raw")
def ingest_raw(request: Request, item: Optional[RawNewsIn] = None):
    item = item or RawNewsIn()
    result = request.app.state.repository.upsert(item.title, item.summary, item.category)
    logger.debug("Ingest '%s' -> %s", item.title, result.value)
    return {result.value: True}

# GET
@app.get("/api/trending")
def trending(request: Request, limit: int = Query(DEFAULT_TRENDING_LIMIT, ge=1, le=MAX_PAGE_LIMIT)):
    items = request.app.state.ranking.top_trending(limit)
    return [n.model_dump() for n in items]

@app.get("/api/category/{cat}")
def by_category(cat: str, request: Request, limit: int = Query(DEFAULT_CATEGORY_LIMIT, ge=1, le=MAX_PAGE_LIMIT)):
    items = request.app.state.ranking.top_by_category(cat, limit)
    return [n.model_dump() for n in items]


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("trending.api.main:app", host="0.0.0.0", port=PORT)
