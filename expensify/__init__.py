"""Expensify asset tracking API."""
