"""RAG chat service: semantic and hybrid question answering over OpenSearch."""

__version__ = "0.1.0"
