"""Tool and blog directory backed by a NocoDB record store."""
