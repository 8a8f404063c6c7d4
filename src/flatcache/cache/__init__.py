"""
Cache package.

This package provides:
- Cache interface and the no-op backend (base.py)
- File cache (file_cache.py): one gzip-optional file per key in a flat directory
"""
