"""
HTTP entry points (FastAPI).
"""
