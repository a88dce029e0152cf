"""Schemas Layer - request/response models for the HTTP API."""
