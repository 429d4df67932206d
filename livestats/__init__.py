"""
Live Statistics Service
=======================

Same-origin proxy for the Reddit, Steam Store and SteamSpy public APIs,
plus an aggregation pipeline that turns them into live community stats.

Pipeline: Fetch → Parse → Normalize → Cache → Refresh → Fall back
"""

__version__ = "0.1.0"
