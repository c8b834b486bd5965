"""Repository access and crawling."""

from .crawler import RepositoryCrawler
from .http_repository import MavenHttpRepository

__all__ = ["MavenHttpRepository", "RepositoryCrawler"]
