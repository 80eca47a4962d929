"""
Ingestion — text extraction, chunking, and embedding into the vector store.

Turns an uploaded document into ``(page, text)`` pairs, cuts them into
fixed-width chunks and embeds each chunk before it is added to a store.
"""
