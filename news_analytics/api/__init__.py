"""
FastAPI news analytics service.

Provides REST API for:
- POST /api/keywords - TF-IDF keyword extraction
- POST /api/topics, /api/topics/urls - Topic modeling
- POST /api/articles/fetch, /api/articles/search - Article access
- POST /api/summarize, /api/translate, /api/sentiment, /api/entities
- GET /health - Service health check
"""

from news_analytics.api.app import create_app

__all__ = ["create_app"]
