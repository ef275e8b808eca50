"""Adapters that implement the domain storage ports"""
