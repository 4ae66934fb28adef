"""
Auction articles: persistence, search and HTTP endpoints.
"""
