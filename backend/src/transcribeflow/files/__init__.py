"""File workflow service and HTTP endpoints"""
