"""
Dashboard API - JSON feed of aggregated pull requests for the display layer.

Serves the DashboardStore over FastAPI and lets the frontend trigger refreshes.
"""
