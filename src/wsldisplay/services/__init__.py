"""Service layer — orchestrates resolve → probe and returns LookupResult."""
