"""
Integration tests for objectquery.

These tests run the query builder end to end against collections:
- Filtering, sorting and counting
- Aggregations
- Persistence of collections
"""
