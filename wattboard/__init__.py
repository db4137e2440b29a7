"""Wattboard: authentication and household energy tracking API."""
