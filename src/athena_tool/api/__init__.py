"""Dashboard HTTP API.

Thin FastAPI layer over QueryOrchestrator; every query response has the
`{success, data | error}` shape.
"""
