"""
Infrastructure Layer

Concrete shift backends (HTTP and in-memory) and their payload mappers.
"""
