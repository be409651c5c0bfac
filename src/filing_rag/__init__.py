"""SEC filing RAG — section, chunk, embed and search 10-K/10-Q filings."""

__version__ = "0.1.0"
