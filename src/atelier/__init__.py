"""Atelier - client, style and account management for a fashion atelier."""
