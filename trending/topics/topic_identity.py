import re
import hashlib
from typing import Optional

# Ordem importa: cada passo assume que o anterior já virou espaço/nada
_TAG_RE = re.compile(r"<[^>]+>")
_URL_RE = re.compile(r"https?://\S+")
_DIGIT_RE = re.compile(r"\d")
_SYMBOL_RE = re.compile(r"[^\w\s]")
_SPACE_RE = re.compile(r"\s+")

def canonicalize(text: Optional[str]) -> str:
    """
    Normaliza um título para virar chave de dedupe (nunca exibido).
    lower -> tags -> URLs -> dígitos -> pontuação/emoji -> espaços -> trim.
    """
    t = (text or "").lower()
    t = _TAG_RE.sub("", t)
    t = _URL_RE.sub("", t)
    t = _DIGIT_RE.sub("", t)
    t = _SYMBOL_RE.sub("", t)
    t = _SPACE_RE.sub(" ", t)
    return t.strip()

def topic_key(canonical_title: str) -> str:
    # SHA-1 só como proxy de igualdade com largura fixa, não é segurança
    return hashlib.sha1(canonical_title.encode("utf-8")).hexdigest()

def topic_key_for_title(title: Optional[str]) -> str:
    return topic_key(canonicalize(title))
