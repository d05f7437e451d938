"""
models/ - Domain and Storage Models
===================================
Plain dataclasses for profiles as callers see them, profiles as rows in
the database, query options, and the codec that maps between the two.
"""
