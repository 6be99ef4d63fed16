# src/prompts/__init__.py — v1
"""Prompt templates and builders."""
