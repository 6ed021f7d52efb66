"""
Customers module.

Scope:
- Customers CRUD over a single `customers` table (create, list, get, full-replacement update, delete)
- No validation beyond JSON type coercion, no pagination/filtering
"""
