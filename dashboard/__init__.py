"""YouTube Channel Dashboard backend."""
