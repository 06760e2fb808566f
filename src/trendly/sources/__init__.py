"""External product sources.

Stores searched outside the catalog, behind a common interface:

- AmazonSource: Amazon results via SerpAPI
- FlipkartSource: Flipkart results via SerpAPI

Example:
    async with AmazonSource(api_key="...") as source:
        for product in await source.search("noise cancelling headphones"):
            print(product.title, product.current_price)
"""
from trendly.sources.base import ProductSourceABC
from trendly.sources.error_mapper import SourceErrorMapper
from trendly.sources.serpapi import AmazonSource, FlipkartSource, SerpApiSource

__all__ = [
    "AmazonSource",
    "FlipkartSource",
    "ProductSourceABC",
    "SerpApiSource",
    "SourceErrorMapper",
]
