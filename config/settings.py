#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings

from .constants import API_RATE_LIMIT, MAX_MARKDOWN_SIZE_KB, LOG_LEVEL


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    # ========== Application ==========
    app_name: str = "Markdown to DOCX Converter"

    # ========== API Server ==========
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    rate_limit: str = API_RATE_LIMIT
    max_markdown_size_kb: int = MAX_MARKDOWN_SIZE_KB
    cors_origins: List[str] = ["http://localhost:3000"]

    # ========== Rendering ==========
    # Base body font size in points; None keeps the template default
    default_font_size: Optional[float] = None

    # Nested lists deeper than the 9 defined numbering levels:
    #   clamp - stay on the deepest level (8)
    #   cycle - wrap around (level % 9)
    list_level_overflow: str = "clamp"

    # ========== Logging ==========
    log_level: str = LOG_LEVEL

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields from .env that aren't defined in model

    def print_config(self):
        """Print configuration summary"""
        print("\n" + "="*70)
        print("⚙️  CONFIGURATION")
        print("="*70)
        print(f"App:             {self.app_name}")
        print(f"API:             {self.api_host}:{self.api_port}")
        print(f"Rate Limit:      {self.rate_limit}")
        print(f"Max Markdown:    {self.max_markdown_size_kb} KB")
        print(f"Font Size:       {self.default_font_size or 'template default'}")
        print(f"List Overflow:   {self.list_level_overflow}")
        print("="*70 + "\n")


# Global settings instance
settings = Settings()
