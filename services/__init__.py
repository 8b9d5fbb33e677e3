"""Application services over the sale repository."""
