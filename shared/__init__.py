"""Cross-cutting helpers shared by the API clients, the CWL engine and the web app.

Configuration defaults, the error hierarchy, the TTL cache service, tag
normalization and rotating-log setup all live here.
"""
