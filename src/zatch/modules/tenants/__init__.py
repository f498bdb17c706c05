"""Agencies, their domains and their members.

Also home of the hostname resolver and access gate that decide which tenant
a request acts on.
"""
