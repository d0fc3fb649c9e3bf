"""
db/ - Database Layer
====================
Handles the PostgreSQL connection pool and the demo schema bootstrap.
This layer is the lowest in the architecture and depends only on config.
"""
