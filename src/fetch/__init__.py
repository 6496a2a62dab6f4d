"""Remote schema retrieval.

This package fetches raw schema files from a version-controlled source
tree over HTTP. It performs no local writes and no retries.
"""
