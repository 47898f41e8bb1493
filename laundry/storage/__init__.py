"""
Persistence for the laundry shop.

This package is responsible for:
* The key-value store abstraction and its in-memory and JSON-file backends.
* Reading and writing whole record collections as JSON arrays.
* Seeding the default admin account and laundry packages on first run.
"""
