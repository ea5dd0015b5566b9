"""Blog GraphQL API: authors, posts and comments over a Relay-style schema."""

__version__ = "1.0.0"
