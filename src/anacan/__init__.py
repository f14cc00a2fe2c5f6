"""Anacan - provisioning, seeding and offline tooling for the Anacan.az blog.

Creates the blog's collections, attributes and indexes on the hosted document
database, seeds demo content, keeps menus in step with categories and pages,
and serves sitemaps and feeds for local development.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
