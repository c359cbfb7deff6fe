# bga_geek/errors.py
from __future__ import annotations


class BggGeekError(Exception):
    pass


class ResolutionNotFound(BggGeekError):
    def __init__(self, query: str):
        super().__init__(f"Not found: {query}")
        self.query = query


class NetworkFailure(BggGeekError):
    def __init__(self, url: str, reason: str = ""):
        super().__init__(f"Network error for {url}: {reason}" if reason else f"Network error for {url}")
        self.url = url
        self.reason = reason


class HttpFailure(NetworkFailure):
    def __init__(self, url: str, status: int):
        super().__init__(url, f"HTTP {status}")
        self.status = status


class ParseFailure(BggGeekError):
    pass
