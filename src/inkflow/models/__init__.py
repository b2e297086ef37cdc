"""Data models for the InkFlow data layer."""
