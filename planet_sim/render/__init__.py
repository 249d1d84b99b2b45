"""Live rendering front end."""
