"""Embeddings, similarity search and the resource matcher."""
