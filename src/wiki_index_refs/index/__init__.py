"""
Index record schema and decoding.
"""
