"""GroomFlow salon management backend."""
