"""
FeedMind

A FastAPI RSS reader service: feed subscriptions, on-demand feed fetching,
and AI summaries, analysis and recommendations.
"""

__version__ = "1.0.0"
