"""HTML, CSS, URL and JSON helpers"""
