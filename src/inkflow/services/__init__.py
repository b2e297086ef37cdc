"""Service layer for the InkFlow data layer."""
