"""Routing — name transforms, aliases, and regex routes.

The alias table is compiled from configuration when the app freezes and
is read-only afterwards.
"""
