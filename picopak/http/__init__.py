"""
HTTP transport for index fetches and artifact downloads.
"""

from .client import MAX_REDIRECTS, HttpClient, HttpResponse

__all__ = ["MAX_REDIRECTS", "HttpClient", "HttpResponse"]
