"""Core retry machinery for the HTTP orchestrator."""
