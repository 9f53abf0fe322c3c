"""
Infrastructure Layer - External Service Integrations

Contains:
- sources: Remote lexical search API clients
"""
