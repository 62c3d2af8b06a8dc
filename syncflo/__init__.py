"""
SyncFlo Backend

Brokers between the SyncFlo PostgreSQL database and Nango, keeping each
user's per-provider integration connections in sync, and serves the account
and billing endpoints used by the SyncFlo frontend.
"""

__version__ = "1.0.0"
