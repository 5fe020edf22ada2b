"""
Pacelane - LinkedIn content-creation onboarding service

Collects a creator's preferences through a multi-step onboarding wizard
(LinkedIn profile, WhatsApp number, pacing, goals, content pillars, writing
format, knowledge uploads) and turns the aggregated profile into AI-generated
content suggestions.

Copyright (c) 2025 Pacelane
Licensed under MIT License
"""

__version__ = "1.0.0"
__author__ = "Pacelane Team"
__license__ = "MIT"

# Import main application for easy access
from .app import app

__all__ = ["app", "__version__"]
