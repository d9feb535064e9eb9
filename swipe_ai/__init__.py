"""Swipe AI Service - agentic landing page swipe pipeline"""
__version__ = "1.0.0"
