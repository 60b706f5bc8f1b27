"""
Entry points.

Usage:
    rag-chunk chunk document.json --strategy markdown
"""
