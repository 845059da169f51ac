"""
Competitor website scraping.
"""

from app.scraping.data_source import CompetitorDataSource, FetchError, WebsiteDataSource

__all__ = ["CompetitorDataSource", "FetchError", "WebsiteDataSource"]
