"""
services/ - Business Logic Layer
================================
Predicate building, sort resolution, invalidation events and the
ProfileService that ties them to a repository.
"""
