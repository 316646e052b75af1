# ABOUTME: SQL DDL for the ireaderlink key/value cache database.
# ABOUTME: A single string-keyed table holding JSON-encoded cache values.

SCHEMA_V1 = """
-- String key/value pairs; values are JSON documents owned by the caller
CREATE TABLE kv_entries (
    key   TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""
