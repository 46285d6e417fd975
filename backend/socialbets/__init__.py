"""Social Bets: group-chat agent that mediates informal prediction-market bets."""

__version__ = "0.1.0"
__author__ = "Social Bets Team"

__all__ = ["__version__", "__author__"]
