"""Resolver package for the GraphQL schema.

One module per entity. Root query and mutation fields and nested type fields
import these functions lazily to avoid circular imports between types.
"""
