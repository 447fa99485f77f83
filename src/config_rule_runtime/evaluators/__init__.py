"""Evaluators shipped with the runtime."""
