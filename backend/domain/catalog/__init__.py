"""
Catalog Domain - Entities, Paths, and Repository Ports.

This domain handles the category taxonomy of the parts catalog:
- Category records and tree nodes
- Materialized path encoding
- Custom-field values attached to categories
"""
