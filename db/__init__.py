"""
db/ - Database Layer
====================
PostgreSQL connection pool, schema bootstrap and sample-data seeding.
This layer is the lowest in the architecture; only the repositories talk to it.
"""
