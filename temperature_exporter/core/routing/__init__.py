from .topic_router import TopicRouter

__all__ = ["TopicRouter"]
