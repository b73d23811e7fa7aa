"""Local content store for the campus feed: users, posts, comments and rewards."""

__version__ = "0.1.0"
