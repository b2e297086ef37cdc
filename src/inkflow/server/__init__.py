"""Tool server exposing the InkFlow operations."""
