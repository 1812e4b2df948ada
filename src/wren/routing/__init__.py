"""Routing — path pattern compilation, route table, and parameter extraction.

Routes are registered during setup and frozen when the app starts
serving.
"""
