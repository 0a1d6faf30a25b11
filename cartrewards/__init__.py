"""
CartRewards - cart milestone rewards backend for Shopify storefronts
"""
__version__ = "1.0.0"
