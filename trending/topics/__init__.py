from .topic_identity import canonicalize, topic_key, topic_key_for_title

__all__ = ["canonicalize", "topic_key", "topic_key_for_title"]
