"""Kernel utilities: deterministic hashing and record id generation."""
