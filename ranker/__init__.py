"""Spotify Ranker — rate albums, rate each other."""
