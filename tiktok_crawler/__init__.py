"""Simulated TikTok product crawler: Gemini extraction into a filterable catalog."""
