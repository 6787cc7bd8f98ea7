"""Services: orchestration of a dispatch run and its concurrency primitives."""
