"""Sproutify music player core."""
