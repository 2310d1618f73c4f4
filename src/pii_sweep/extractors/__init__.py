"""Format-aware extraction strategies (text, JSON, SQL, MySQL dump, flat)."""
