# ABOUTME: ireaderlink - checks whether Douban books are available on the iReader storefront.
# ABOUTME: Matches titles against storefront search results and caches the outcome.

__version__ = "0.1.0"
