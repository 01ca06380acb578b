"""Shared infrastructure: configuration, logging, storage, and the LLM client."""
