"""
pragent: the AI assistant surface of a PR-campaign dashboard.

Each subpackage hides one design decision: how chat streams are decoded,
how a turn travels to the backend, how the conversation is remembered,
how requests are relayed, and how the session is presented.
"""

__version__ = "0.1.0"
