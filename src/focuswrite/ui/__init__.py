"""Front ends for writing sessions."""
