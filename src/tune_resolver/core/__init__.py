"""
Core resolution components: parsing, scoring, search and orchestration.
"""
