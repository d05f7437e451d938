"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all queries for the profiles table.
Repositories deal in StorageRecord rows; mapping to domain objects
happens in the service layer.
"""
