"""Spare Parts API — in-memory lookup service over a delimited parts export."""
