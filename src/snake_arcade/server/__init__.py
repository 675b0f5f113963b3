"""Leaderboard REST API and play WebSocket."""
