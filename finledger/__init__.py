"""finledger: FIFO portfolio accounting and tax-basket reporting."""

__version__ = "0.1.0"
