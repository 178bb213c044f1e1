"""
FastAPI dependencies.
"""
