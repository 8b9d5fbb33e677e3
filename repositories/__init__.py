"""Sale record persistence back ends."""
