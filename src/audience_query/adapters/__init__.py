"""외부 시스템 어댑터."""
