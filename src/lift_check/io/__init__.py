"""Program file serialization and storage."""
