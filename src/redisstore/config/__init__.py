"""Typed configuration for redisstore."""
