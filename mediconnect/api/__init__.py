"""
HTTP API for MediConnect.
"""
