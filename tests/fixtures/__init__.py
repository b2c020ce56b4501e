"""Test fixtures and sample data"""
