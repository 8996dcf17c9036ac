"""
Shared service utilities.

- http.py - requests session with retry policy, timeouts and client headers
"""
