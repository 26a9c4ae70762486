"""Contextual chat pipeline: validate, classify, fetch, answer."""
