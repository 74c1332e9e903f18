"""Renderer adapters for concrete terminal toolkits."""
