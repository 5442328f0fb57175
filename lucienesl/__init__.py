"""In-memory trading agent: price history, moving-average features and logistic-regression signals."""

__version__ = "0.0.1"
__all__ = ["errors", "linear", "features", "state", "price_feed", "program"]