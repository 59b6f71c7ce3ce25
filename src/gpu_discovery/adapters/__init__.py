"""Adapters - inbound REST API and outbound process/parser implementations."""
