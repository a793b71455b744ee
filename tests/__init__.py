"""
Static Imagery Provider test suite

Structure:
- unit/: selection, catalog, resolver, provider, fetcher, config
- integration/: HTTP service against an on-disk catalog
- fakes.py: network-free fetcher double
"""
