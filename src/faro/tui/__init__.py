"""Interactive update picker."""
