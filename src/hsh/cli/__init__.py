"""Interactive front end for hsh."""
