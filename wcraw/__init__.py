# wcraw/__init__.py
"""
wcraw package initializer.
Defines package version and exposes the crawl core.
"""
__version__ = "0.1.0"

from wcraw.crawler.normalizer import is_valid_url, normalize, same_url  # noqa: E402
