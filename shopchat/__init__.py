"""
Customer-service chat backend for an e-commerce storefront.
"""
