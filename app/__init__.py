"""
App package for the inspection report generator.
"""
