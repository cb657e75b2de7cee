"""
CLI support modules.
"""
