"""User management and profile endpoints"""
