"""Probing, selection, compilation and execution pipeline components."""
