"""Market summary API: quotes and financial news behind one REST surface."""

__version__ = "1.0.0"
