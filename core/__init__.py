"""
Markdown to DOCX conversion core.
"""
